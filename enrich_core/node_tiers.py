"""Тарифы по количеству узлов (фиксированный список, 7 и 9 узлов нет)"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Пропускная способность одного узла, профилей в минуту
PROFILES_PER_NODE_PER_MINUTE = 50


@dataclass(frozen=True)
class NodeTier:
    """Тариф: количество узлов и описание для карточки выбора"""

    nodes: int
    title: str
    subtitle: str
    description: str
    popular: bool = False

    @property
    def speed_per_minute(self) -> int:
        return self.nodes * PROFILES_PER_NODE_PER_MINUTE

    @property
    def speed_label(self) -> str:
        return f"{self.speed_per_minute} profiles/min"

    @property
    def nodes_label(self) -> str:
        return "Node" if self.nodes == 1 else "Nodes"


NODE_TIERS: Tuple[NodeTier, ...] = (
    NodeTier(1, "Starter", "Perfect for small batches", "Ideal for testing or small datasets"),
    NodeTier(2, "Basic", "Good for medium datasets", "Balanced speed and efficiency"),
    NodeTier(3, "Standard", "Most popular choice", "Recommended for most users", popular=True),
    NodeTier(4, "Pro", "High performance", "Fast processing for large datasets"),
    NodeTier(5, "Turbo", "Maximum speed", "Ultimate performance"),
    NodeTier(6, "Enterprise", "Heavy workloads", "For enterprise-scale processing"),
    NodeTier(8, "Ultra", "Extreme performance", "Maximum parallel processing"),
    NodeTier(10, "Beast Mode", "Unleash the power", "Ultimate processing power"),
)

NODE_COUNTS: Tuple[int, ...] = tuple(t.nodes for t in NODE_TIERS)

DEFAULT_NODE_COUNT = 3


def get_tier(nodes: int) -> Optional[NodeTier]:
    """Найти тариф по количеству узлов"""
    for tier in NODE_TIERS:
        if tier.nodes == nodes:
            return tier
    return None
