"""Row builders and HTTP fakes for catalog tests.

Row ids are assigned up front so side rows can reference them.
"""
import uuid

import requests

from pipe_catalog.db_models import Accessory, Image, ItemType, Pipe, Rating, Tobacco


def _id():
    return uuid.uuid4().hex


def make_pipe(name, brand="Peterson", **kw):
    fields = dict(id=_id(), material="Briar", shape="Bent", finish="Natural", country="Irlanda")
    fields.update(kw)
    return Pipe(name=name, brand=brand, **fields)


def make_tobacco(name, brand="Dunhill", **kw):
    fields = dict(id=_id(), blend_type="English", contents="Latakia, Oriental", cut="Ribbon")
    fields.update(kw)
    return Tobacco(name=name, brand=brand, **fields)


def make_accessory(name, brand=None, category="Ferramenta", **kw):
    fields = dict(id=_id(), description="Acessório de madeira")
    fields.update(kw)
    return Accessory(name=name, brand=brand, category=category, **fields)


def make_rating(item, item_type, value):
    return Rating(id=_id(), item_id=item.id, item_type=ItemType(item_type), rating=value)


def make_image(item, item_type, filename, featured=True, sort_order=0):
    return Image(
        id=_id(), item_id=item.id, item_type=ItemType(item_type), filename=filename,
        is_featured=featured, sort_order=sort_order,
    )


def payload(*names, total=None, suggestions=()):
    """A /api/search response body with one pipe per name."""
    results = [
        {"id": n.lower(), "name": n, "manufacturer": "Peterson", "type": "pipe",
         "images": [], "description": "", "averageRating": 0, "totalRatings": 0,
         "category": "Bent", "brand": "Peterson", "shape": "Bent"}
        for n in names
    ]
    return {
        "results": results,
        "total": len(results) if total is None else total,
        "page": 1,
        "totalPages": 1,
        "hasNextPage": False,
        "hasPreviousPage": False,
        "suggestions": list(suggestions),
    }


class FakeResponse:
    def __init__(self, data, status_code=200):
        self.data = data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        return self.data
