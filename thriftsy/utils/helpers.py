import secrets
from decimal import Decimal, ROUND_HALF_UP
from slugify import slugify as python_slugify

CENT = Decimal('0.01')


def slugify(text: str) -> str:
    """Generate URL-friendly slug"""
    return python_slugify(text or '')


def money(value) -> Decimal:
    """Round to 2 decimal places the way the money columns store it"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def allowed_file(filename: str, allowed_extensions: set) -> bool:
    """Check if file extension is allowed"""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in allowed_extensions


def random_filename(filename: str) -> str:
    """Unguessable stored name keeping the original extension"""
    ext = filename.rsplit('.', 1)[1].lower() if '.' in filename else 'png'
    return f'{secrets.token_hex(12)}.{ext}'
