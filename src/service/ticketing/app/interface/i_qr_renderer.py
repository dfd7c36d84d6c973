from abc import ABC, abstractmethod


class IQrRenderer(ABC):
    @abstractmethod
    def render(self, *, content: str) -> str:
        """
        Render `content` as a QR code

        Returns:
            PNG data URL (`data:image/png;base64,...`)
        """
        pass
