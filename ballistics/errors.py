"""
리포트 엔진 예외 정의
"""


class BallisticsError(Exception):
    """리포트 엔진 기본 예외"""


class AbbreviationExhausted(BallisticsError):
    """전체 길이까지 늘려도 고유한 축약명을 만들 수 없음"""

    def __init__(self, namespace: str, label: str, conflict: str = ""):
        self.namespace = namespace
        self.label = label
        self.conflict = conflict
        message = f"축약명 생성 실패 [{namespace}]: '{label}'"
        if conflict:
            message += f" ('{conflict}'와 충돌)"
        super().__init__(message)


class UnknownWeaponError(BallisticsError, LookupError):
    """데이터셋에 없는 무기"""

    def __init__(self, weapon_name: str):
        self.weapon_name = weapon_name
        super().__init__(f"무기를 찾을 수 없습니다: {weapon_name}")


class UnknownCategoryError(BallisticsError, LookupError):
    """데이터셋에 없는 카테고리"""

    def __init__(self, category_name: str):
        self.category_name = category_name
        super().__init__(f"카테고리를 찾을 수 없습니다: {category_name}")
