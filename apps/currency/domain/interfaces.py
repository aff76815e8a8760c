from abc import ABC, abstractmethod
from decimal import Decimal


class BaseRateTableProvider(ABC):
    @abstractmethod
    def get_rates(self) -> dict[str, Decimal] | None:
        pass
