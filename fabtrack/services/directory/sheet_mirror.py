from typing import Optional

from starlette.concurrency import run_in_threadpool

from fabtrack.schemas.orders.order_schemas import Order
from fabtrack.services.directory.google_sheets import build_sheets_service
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)


class SheetMirror:
    """Appends newly created orders to a tracking spreadsheet."""

    def __init__(self, spreadsheet_id: str, sheet_range: str = "Orders!A:F", service=None):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self._service_client = service

    def _service(self):
        if self._service_client is None:
            self._service_client = build_sheets_service()
        return self._service_client

    def _append(self, row: list) -> None:
        (
            self._service()
            .spreadsheets()
            .values()
            .append(
                spreadsheetId=self.spreadsheet_id,
                range=self.sheet_range,
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            )
            .execute()
        )

    async def append_order(self, order: Order, client_name: Optional[str] = None) -> None:
        row = [
            order.id,
            client_name or "Unknown Client",
            order.client_id,
            order.created_at.isoformat(),
            order.current_stage.value,
            order.status.value,
        ]
        await run_in_threadpool(self._append, row)
        logger.info(f"Order {order.id} mirrored to spreadsheet {self.spreadsheet_id}")
