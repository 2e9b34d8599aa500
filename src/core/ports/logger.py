from abc import ABC, abstractmethod


class Logger(ABC):
    """
    Port (interface) for structured logging.
    Extra keyword arguments are rendered as key=value pairs by implementations.
    """

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def warn(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        pass
