"""
유효 데미지 계산

감쇠 샘플을 우측 연속 계단 함수로 취급:
- target_range 이하인 샘플 중 range가 가장 큰 샘플의 데미지
- 해당 샘플이 없으면 0
- 같은 range가 중복되면 먼저 나온 샘플 우선 (저장소 ON CONFLICT DO NOTHING과 동일)
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from .models import Configuration, Dataset, DamageDropoff

ZERO_DAMAGE = Decimal(0)


def find_effective_dropoff(
    dropoffs: Iterable[DamageDropoff],
    target_range: int
) -> Optional[DamageDropoff]:
    """target_range에 적용되는 샘플 반환 (없으면 None)

    입력 순서와 무관하게 전체를 스캔한다.
    """
    best: Optional[DamageDropoff] = None
    for dropoff in dropoffs:
        if dropoff.range > target_range:
            continue
        # 동일 range는 갱신하지 않음 → 첫 샘플 유지
        if best is None or dropoff.range > best.range:
            best = dropoff
    return best


def effective_damage(configuration: Configuration, target_range: int) -> Decimal:
    """구성의 target_range 유효 데미지"""
    dropoff = find_effective_dropoff(configuration.dropoffs, target_range)
    if dropoff is None:
        return ZERO_DAMAGE
    return dropoff.damage


def observed_ranges(dataset: Dataset) -> List[int]:
    """데이터셋에 등장하는 모든 샘플 거리 (오름차순, 중복 제거)"""
    ranges = {
        dropoff.range
        for config in dataset.iter_configurations()
        for dropoff in config.dropoffs
    }
    return sorted(ranges)
