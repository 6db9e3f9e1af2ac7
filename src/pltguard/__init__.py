"""pltguard - Dialyzer for Mix projects with layered PLT caching."""
