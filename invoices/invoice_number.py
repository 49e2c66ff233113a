import re
from datetime import datetime

INVOICE_PREFIX = "INV"
SEQUENCE_WIDTH = 6
_SEQUENTIAL = re.compile(r"^INV(\d+)$")


def next_invoice_number(last_issued, now=None):
    """Return the invoice number that follows ``last_issued``.

    ``INV000042`` becomes ``INV000043``. When there is no usable previous
    number the result is ``INV`` + ``yyyyMMddHHmm``; that form is only unique
    per minute, so callers still have to check the number before committing.
    """
    match = _SEQUENTIAL.match((last_issued or "").strip())
    if match:
        return f"{INVOICE_PREFIX}{int(match.group(1)) + 1:0{SEQUENCE_WIDTH}d}"

    now = now or datetime.now()
    return f"{INVOICE_PREFIX}{now.strftime('%Y%m%d%H%M')}"
