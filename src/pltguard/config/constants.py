"""Configuration constants.

Values here are not user-configurable.
"""

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_CACHE_DIR = "~/.cache/dialyzer/plts"
"""Shared PLT directory, one file per installed Erlang/Elixir version."""

DEFAULT_WARNINGS = ("unmatched_returns", "error_handling", "underspecs", "unknown")
"""Non-default Dialyzer warnings enabled for the analysis pass."""

# =============================================================================
# PLT Contents
# =============================================================================
# Erlang/OTP applications included in the platform PLT. Listed explicitly
# so that non-OTP libraries installed under the code root (e.g. eqc) stay out.

ERLANG_CORE_APPS = (
    "asn1",
    "common_test",
    "compiler",
    "crypto",
    "debugger",
    "dialyzer",
    "diameter",
    "edoc",
    "eldap",
    "erl_docgen",
    "erl_interface",
    "erts",
    "et",
    "eunit",
    "ftp",
    "inets",
    "kernel",
    "megaco",
    "mnesia",
    "observer",
    "odbc",
    "os_mon",
    "parsetools",
    "public_key",
    "reltool",
    "runtime_tools",
    "sasl",
    "snmp",
    "ssh",
    "ssl",
    "stdlib",
    "syntax_tools",
    "tftp",
    "tools",
    "wx",
    "xmerl",
)

ELIXIR_CORE_APPS = ("eex", "elixir", "ex_unit", "iex", "logger", "mix")

# =============================================================================
# Project Layout
# =============================================================================

CONFIG_DIR_NAME = ".pltguard"
CONFIG_FILE_NAME = "config.yaml"

DEPS_PLT_PREFIX = "deps-"
PLT_SUFFIX = ".plt"
