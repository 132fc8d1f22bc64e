"""Constants for package-curator."""

# Exit codes
EXIT_SUCCESS = 0  # Command completed
EXIT_ERROR = 2  # Command failed due to error

# Prefix used to wrap declared licenses that are not valid SPDX expressions
LICENSE_REF_PREFIX = "LicenseRef-"

# Logger namespace configured by the CLI
LOGGER_NAME = "package_curator"
