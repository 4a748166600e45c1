from botpanel.models.bot import ApiClientConfig, Bot, GroupModel
from botpanel.services.bot_store import InMemoryBotStore


def sample_bot() -> Bot:
    return Bot(
        name="Sample Bot",
        api_client=ApiClientConfig(
            server_ip="http://127.0.0.1:5000",
            api_key="025002"
        ),
        role="Tutor",
        token="sample-token",
        dev_token="sample-dev-token",
        groups=[
            GroupModel(name="Group A", is_valid=True),
            GroupModel(name="Group B"),
        ]
    )


def sample_store() -> InMemoryBotStore:
    """In-memory store holding one sample bot."""
    return InMemoryBotStore([sample_bot()])
