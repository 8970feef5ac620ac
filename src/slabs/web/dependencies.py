"""FastAPI dependency injection for optimization services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from slabs.application.commands import OptimizeQuoteCommand
from slabs.infrastructure.persistence import InMemoryPieceRepository, StaticMachineDefaults


@lru_cache(maxsize=1)
def get_piece_repository() -> InMemoryPieceRepository:
    """Process-wide piece store receiving oversize flags."""
    return InMemoryPieceRepository()


@lru_cache(maxsize=1)
def get_machine_defaults() -> StaticMachineDefaults:
    return StaticMachineDefaults()


def get_optimize_command(
    repository: Annotated[InMemoryPieceRepository, Depends(get_piece_repository)],
    machine_defaults: Annotated[StaticMachineDefaults, Depends(get_machine_defaults)],
) -> OptimizeQuoteCommand:
    """Dependency for OptimizeQuoteCommand."""
    return OptimizeQuoteCommand(machine_defaults=machine_defaults, repository=repository)


# Type aliases for cleaner endpoint signatures
PieceRepositoryDep = Annotated[InMemoryPieceRepository, Depends(get_piece_repository)]
OptimizeCommandDep = Annotated[OptimizeQuoteCommand, Depends(get_optimize_command)]
