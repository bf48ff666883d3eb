# banks.py
# Partner banks a customer can open an account with.

from typing import Dict, List, Optional

BANKS: List[Dict[str, str]] = [
    {"slug": "boa", "name": "Bank of Abyssinia", "description": "Trusted banking partner in Ethiopia", "image": "/abyssinia.jpg"},
    {"slug": "coop", "name": "Coop Bank", "description": "Cooperative Bank of Oromia", "image": "/coop.jpg"},
    {"slug": "awash", "name": "Awash Bank", "description": "One of Ethiopia's leading private banks", "image": "/awash.jpg"},
    {"slug": "tsehay", "name": "Tsehay Bank", "description": "Emerging bank in Ethiopia", "image": "/tsehay.jpg"},
    {"slug": "nib", "name": "Nib Bank", "description": "Innovative banking solutions", "image": "/nib.jpg"},
    {"slug": "gedda", "name": "Gedda Bank", "description": "Serving the financial needs of Ethiopia", "image": "/gedda.jpg"},
]

BANK_SLUGS = frozenset(bank["slug"] for bank in BANKS)


def get_bank(slug: str) -> Optional[Dict[str, str]]:
    for bank in BANKS:
        if bank["slug"] == slug:
            return bank
    return None
