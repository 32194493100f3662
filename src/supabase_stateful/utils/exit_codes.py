"""
Exit codes for supabase-stateful.

Only two outcomes are distinguished: every fatal condition (startup ladder
exhausted, fatal migration failure, failed export, unreadable config) exits
with ERROR_GENERAL.
"""

# Success
SUCCESS = 0

# Any fatal condition
ERROR_GENERAL = 1


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
    }
    return code_names.get(code, f"UNKNOWN({code})")
