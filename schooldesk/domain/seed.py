"""組み込みのシードデータ

リモートストアにもローカルキャッシュにもデータがない場合の初期値。
"""

from __future__ import annotations

from schooldesk.domain.models import Schedule, ScheduleCategory, Shortcut, TrainingPost

_SAMPLE_PDF = "https://www.w3.org/WAI/ER/tests/xhtml/testfiles/resources/pdf/dummy.pdf"

SEED_SCHEDULES: tuple[Schedule, ...] = (
    Schedule(
        id="1",
        title="주간학습안내 제출",
        date="2026-02-22",
        category=ScheduleCategory.OFFICIAL_DOCUMENT,
        description="각 학년별 주간학습안내 취합 및 제출",
    ),
    Schedule(
        id="2",
        title="교직원 월례회의",
        date="2026-02-23",
        category=ScheduleCategory.EVENT,
        time_range="15:00",
        location="시청각실",
    ),
    Schedule(
        id="3",
        title="나이스 복무 신청(연가)",
        date="2026-02-24",
        category=ScheduleCategory.DUTY,
    ),
    Schedule(
        id="4",
        title="학교폭력 예방 연수",
        date="2026-02-22",
        category=ScheduleCategory.TRAINING,
    ),
)

SEED_TRAININGS: tuple[TrainingPost, ...] = (
    TrainingPost(
        id="1",
        title="2026학년도 교육과정 편성 지침",
        author="교육연구부",
        date="2026-02-20",
        summary="신학년도 교육과정 수립을 위한 필수 지침 안내입니다.",
        pdf_url=_SAMPLE_PDF,
        file_type="pdf",
    ),
    TrainingPost(
        id="2",
        title="디지털 선도학교 운영 계획",
        author="정보부",
        date="2026-02-18",
        summary="AI 코스웨어 활용 및 태블릿 PC 관리 규정 안내.",
        pdf_url=_SAMPLE_PDF,
        file_type="pdf",
    ),
)

SEED_SHORTCUTS: tuple[Shortcut, ...] = (
    Shortcut(id="1", label="나이스", url="https://www.neis.go.kr"),
    Shortcut(id="2", label="에듀파인", url="https://klef.go.kr"),
    Shortcut(id="3", label="학교홈페이지", url="http://dasu.es.kr"),
    Shortcut(id="4", label="K-에듀파인", url="https://fin.go.kr"),
)
