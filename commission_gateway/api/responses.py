"""JSON response rendering that keeps decimals exact on the wire"""

from typing import Any

import simplejson
from starlette.responses import JSONResponse


class DecimalJSONResponse(JSONResponse):
    """
    Emit Decimal values as plain JSON numbers with their own precision.

    The stock encoder would turn Decimal("10.00") into the string "10.00" or
    the float 10.0; amounts and commissions must stay 10.00.
    """

    def render(self, content: Any) -> bytes:
        return simplejson.dumps(
            content,
            use_decimal=True,
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")
