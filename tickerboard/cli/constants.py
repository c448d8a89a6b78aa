"""Exit codes used by CLI commands."""

VALIDATION_EXIT_CODE = 2
FETCH_ERROR_EXIT_CODE = 3
