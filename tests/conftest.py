from __future__ import annotations

import pytest
import pytest_asyncio

from tonality.service import SentimentService
from tonality.types import AnchorSet
from tests.utils import ToyEmbeddingsClient

TOY_TABLE = {
    "great": (1.0, 0.0),
    "terrible": (-1.0, 0.0),
    "okay": (0.0, 1.0),
    "near great": (0.9, 0.1),
    "near terrible": (-0.9, 0.1),
    "blank": (0.0, 0.0),
}


@pytest.fixture
def toy_anchors() -> AnchorSet:
    return AnchorSet(positive=["great"], negative=["terrible"], neutral=["okay"])


@pytest.fixture
def toy_client() -> ToyEmbeddingsClient:
    return ToyEmbeddingsClient(dict(TOY_TABLE))


@pytest_asyncio.fixture
async def toy_service(toy_client: ToyEmbeddingsClient):
    service = SentimentService(toy_client)
    yield service
    await service.aclose()
