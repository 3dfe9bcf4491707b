"""Exceptions raised by the Bulletin build pipeline."""


class BuildError(Exception):
    """A build step failed and the build cannot continue."""


class TemplateMissingError(BuildError):
    """A page template could not be loaded or compiled."""

    def __init__(self, template_name, reason=None):
        self.template_name = template_name
        message = f"Template '{template_name}' could not be loaded"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigError(BuildError):
    """Configuration values are invalid."""
