from .meal_import import (
    BatchRowRead,
    ImportRejectedResponse,
    ImportRunRead,
    PendingBatchRead,
    RowErrorRead,
    UploadResultRead,
)

__all__ = [
    "BatchRowRead",
    "ImportRejectedResponse",
    "ImportRunRead",
    "PendingBatchRead",
    "RowErrorRead",
    "UploadResultRead",
]
