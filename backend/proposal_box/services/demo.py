"""Deterministic demo proposals for empty installations."""

from __future__ import annotations

from datetime import datetime, timedelta

from proposal_box.schema.categories import Category
from proposal_box.schema.statuses import ProposalStatus
from proposal_box.schemas.proposal import Endorsement, Proposal


def build_demo_proposals(now: datetime) -> list[Proposal]:
    """Return three demo proposals, newest first, relative to ``now``."""

    return [
        Proposal(
            id=1,
            title="靴下の色にグレーを追加して欲しい",
            content=(
                "靴下の色は黒・白・紺のみですが、友達の学校ではグレーも良いそうです。"
                "なぜグレーがダメなのかわかりません。グレーの追加をお願いします。 #靴下"
            ),
            category=Category.RULES.value,
            status=ProposalStatus.COORDINATING,
            administrator_response="生徒総会での議論を経て、職員会議に提案中です。",
            created_at=now,
        ),
        Proposal(
            id=2,
            title="食堂のメニューに麺類を追加してほしい",
            content="今はパンとおにぎりしかありません。温かい麺類（うどんやラーメン）が食べたいです。 #食堂 #ランチ #改善希望",
            category=Category.FACILITIES.value,
            status=ProposalStatus.RECEIVED,
            created_at=now - timedelta(days=1),
            endorsements=[Endorsement(identity_id="demo", display_name="デモ太郎", timestamp=now)],
        ),
        Proposal(
            id=3,
            title="図書室の開館時間を延長してください",
            content="放課後、部活の前にもう少し勉強したいのですが、すぐに閉まってしまいます。あと30分延長できませんか？",
            category=Category.FACILITIES.value,
            status=ProposalStatus.RESOLVED,
            administrator_response="試験期間中のみ、18:00まで延長することが決定しました。",
            created_at=now - timedelta(days=2),
        ),
    ]
