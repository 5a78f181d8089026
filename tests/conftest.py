"""
Shared pytest fixtures: synthetic blog post data
"""

from datetime import datetime, timezone
from typing import Any, Dict

import pytest
from faker import Faker


class PostFactory:
    """Generates realistic blog post payloads"""

    def __init__(self):
        self.fake = Faker()

    def generate_post(self, **overrides) -> Dict[str, Any]:
        data = {
            "author": {
                "firstName": self.fake.first_name(),
                "lastName": self.fake.last_name()
            },
            "title": self.fake.sentence(),
            "content": self.fake.paragraph(),
            "created": datetime.now(timezone.utc)
        }
        data.update(overrides)
        return data

    def generate_payload(self, **overrides) -> Dict[str, Any]:
        """JSON request body; created is sent as epoch milliseconds like a browser client"""
        data = self.generate_post()
        data["created"] = int(data["created"].timestamp() * 1000)
        data.update(overrides)
        return data

    def new_content(self) -> str:
        return self.fake.paragraph()


@pytest.fixture(scope="session")
def post_factory() -> PostFactory:
    return PostFactory()
