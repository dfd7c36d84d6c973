import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from src.service.ticketing.app.interface.i_qr_renderer import IQrRenderer


class QrcodeRendererImpl(IQrRenderer):
    """PNG data URL, medium error correction, one module of quiet zone."""

    def __init__(self, *, box_size: int = 8, border: int = 1) -> None:
        self.box_size = box_size
        self.border = border

    def render(self, *, content: str) -> str:
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_M, box_size=self.box_size, border=self.border
        )
        qr.add_data(content)
        qr.make(fit=True)
        image = qr.make_image(fill_color='black', back_color='white')

        buffer = io.BytesIO()
        image.save(buffer, format='PNG')
        return 'data:image/png;base64,' + base64.b64encode(buffer.getvalue()).decode()
