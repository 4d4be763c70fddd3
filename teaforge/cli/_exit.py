"""Process exit codes shared by all subcommands."""

OK = 0
INTERNAL_ERR = 1
USER_ERR = 2
