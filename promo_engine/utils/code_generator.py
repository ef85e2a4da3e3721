# promo_engine/utils/code_generator.py
import random
import string
from promo_engine.core.config import CODE_LENGTH

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = CODE_LENGTH) -> str:
    return "".join(random.choices(CODE_ALPHABET, k=length))


def canonical_code(code: str) -> str:
    return code.strip().upper()
