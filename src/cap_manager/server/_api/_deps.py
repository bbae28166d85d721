from typing import Annotated

from fastapi import Depends, Request

from cap_manager.store import RequirementStore


def get_store(request: Request) -> RequirementStore:
    """Build a store for the file this app instance serves."""
    return RequirementStore(
        request.app.state.store_path, logger=request.app.state.logger
    )


StoreDep = Annotated[RequirementStore, Depends(get_store)]
