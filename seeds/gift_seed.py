# seeds/gift_seed.py
from __future__ import annotations
from typing import Any, Dict, List

from hw_types.housewarming_types import GiftItem

SEED_GIFTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "Jogo de Jantar 20 Peças",
        "description": "Conjunto de pratos de porcelana branca Oxford para ocasiões especiais.",
        "imageUrl": "https://images.unsplash.com/photo-1574362848149-11496d93a7c7?auto=format&fit=crop&q=80&w=600",
        "link": "https://www.amazon.com.br/s?k=jogo+de+jantar+porcelana",
        "isReserved": False,
    },
    {
        "id": "2",
        "name": "Fritadeira Elétrica Airfryer",
        "description": "Airfryer potente (4L) para nossas receitas saudáveis de final de semana.",
        "imageUrl": "https://images.unsplash.com/photo-1626071494702-420443e2ee43?auto=format&fit=crop&q=80&w=600",
        "link": "https://www.magazineluiza.com.br/busca/airfryer/",
        "isReserved": False,
    },
    {
        "id": "3",
        "name": "Jogo de Toalhas Gigante",
        "description": "Kit banho e rosto em algodão egípcio, cor off-white.",
        "imageUrl": "https://images.unsplash.com/photo-1584622650111-993a426fbf0a?auto=format&fit=crop&q=80&w=600",
        "link": "https://www.tokstok.com.br/banho/jogos-de-toalha",
        "isReserved": False,
    },
    {
        "id": "4",
        "name": "Aspirador de Pó Robô",
        "description": "Para nos ajudar a manter o novo lar sempre impecável.",
        "imageUrl": "https://images.unsplash.com/photo-1518314916381-77a37c2a49ae?auto=format&fit=crop&q=80&w=600",
        "link": "https://www.mercadolivre.com.br/aspirador-robo",
        "isReserved": False,
    },
]


def seed_gifts() -> List[GiftItem]:
    """Fresh copy of the built-in catalog, used when nothing is stored yet."""
    return [GiftItem.model_validate(g) for g in SEED_GIFTS]
