import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from app.domain.entities import ImportField, RawImportRow


def make_row(row_number: int | None = 2, **overrides) -> RawImportRow:
    """Build a valid parsed row; keyword overrides use field keys, ``None`` removes."""

    values = {
        ImportField.NAME: "Jollof Rice",
        ImportField.INGREDIENTS_COST: 2000.0,
        ImportField.PACKAGING: 150.0,
        ImportField.DELIVERY: 300.0,
        ImportField.PLATFORM_FEE: 200.0,
        ImportField.PREPARATION_TIME: 60.0,
    }
    for key, value in overrides.items():
        import_field = ImportField(key)
        if value is None:
            values.pop(import_field, None)
        else:
            values[import_field] = value
    return RawImportRow(values=values, row_number=row_number)


@pytest.fixture()
def row_factory():
    return make_row
