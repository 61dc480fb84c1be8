"""Base class for services that log through the structured logger."""

from app.services.logger import StructuredLogger


class BaseService:
    """
    Gives a service a structured logger named after it.

    Example:
        class UserService(BaseService):
            def __init__(self, logger: StructuredLogger):
                super().__init__("UserService", logger)

            def do_something(self):
                self.logger.debug("Did something!")
    """

    def __init__(self, name: str, logger: StructuredLogger):
        self.logger = logger.with_name(name)
