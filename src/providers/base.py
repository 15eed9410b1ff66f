from __future__ import annotations

from abc import ABC, abstractmethod

from core.models import FixtureDataset


class FixturesProviderBase(ABC):
    """
    Interfaccia astratta per una sorgente di fixtures del club.

    Le implementazioni concrete restituiscono record già normalizzati
    (FixtureRecord); dedupe, ordinamento e finestra stagione sono applicati
    a valle dalla pipeline.
    """

    #: tag sorgente scritto nel documento di output
    source: str = ""

    @abstractmethod
    def fetch_fixtures(self) -> FixtureDataset:
        """
        Recupera e normalizza le fixtures.

        Ritorna:
            Lista di FixtureRecord (ordine della sorgente, possibili duplicati).
        """
        raise NotImplementedError
