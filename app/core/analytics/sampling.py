"""加权随机抽样（按累计权重选择类别）。"""

import random
from typing import Iterable, Optional, Protocol, Sequence, Tuple, TypeVar

T = TypeVar('T')


class RandomSource(Protocol):
    """随机源：只需提供 random() -> [0, 1) 的浮点数。random.Random 即满足。"""

    def random(self) -> float:
        ...


def default_random_source() -> random.Random:
    return random.SystemRandom()


def weighted_choice(pairs: Sequence[Tuple[T, float]], rng: Optional[RandomSource] = None) -> T:
    """
    按权重选择一个类别

    做法：draw = rng.random() × 总权重，累计权重，返回第一个累计值 >= draw 的类别。
    权重为 0 的类别永远不会被选中。

    参数：
        pairs: (类别, 相对权重) 序列，权重无需加总为 100
        rng: 随机源，默认 SystemRandom

    返回：
        选中的类别
    """
    candidates = [(category, float(weight)) for category, weight in pairs if weight > 0]
    if not candidates:
        raise ValueError("weighted_choice requires at least one positive weight")

    rng = rng or default_random_source()
    total = sum(weight for _, weight in candidates)
    draw = rng.random() * total

    cumulative = 0.0
    for category, weight in candidates:
        cumulative += weight
        if cumulative >= draw:
            return category
    # 浮点误差兜底
    return candidates[0][0]


def uniform(rng: RandomSource, low: float, high: float) -> float:
    return low + (high - low) * rng.random()


def uniform_choice(options: Iterable[T], rng: RandomSource) -> T:
    options = list(options)
    if not options:
        raise ValueError("uniform_choice requires at least one option")
    index = min(int(rng.random() * len(options)), len(options) - 1)
    return options[index]
