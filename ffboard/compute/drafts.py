"""Draft and manager views."""

from __future__ import annotations

import datetime
from typing import Any

from ffboard.api.schemas import Draft, Pick, Roster, User, coerce_records

from .core import avatar_url, index_users, owner_of
from .models import DraftPickView, DraftSlot, DraftView, Manager


def _from_epoch_ms(value: int | None) -> datetime.datetime | None:
    if not value:
        return None
    return datetime.datetime.fromtimestamp(value / 1000.0, tz=datetime.timezone.utc)


def derive_managers(users: Any) -> list[Manager]:
    user_list = coerce_records(User, users) or []
    return [
        Manager(
            user_id=u.user_id,
            username=u.username,
            display_name=u.display_name or u.username or u.user_id,
            avatar=avatar_url(u.avatar),
            team_name=u.team_name,
        )
        for u in user_list
    ]


def derive_drafts(drafts: Any, users: Any) -> list[DraftView]:
    """Drafts with their order resolved to manager names, sorted by pick slot."""
    draft_list = coerce_records(Draft, drafts)
    if not draft_list:
        return []
    by_id = index_users(coerce_records(User, users) or [])

    out = []
    for d in draft_list:
        order = []
        for user_id, pick in (d.draft_order or {}).items():
            user = by_id.get(user_id)
            order.append(
                DraftSlot(
                    pick=pick,
                    user_id=user_id,
                    display_name=(user and user.display_name) or "Unknown",
                    team_name=user.team_name if user else None,
                    avatar=avatar_url(user.avatar if user else None),
                )
            )
        order.sort(key=lambda s: s.pick)
        out.append(
            DraftView(
                draft_id=d.draft_id,
                type=d.type,
                status=d.status,
                season=d.season,
                teams=d.settings.teams,
                rounds=d.settings.rounds,
                start_time=_from_epoch_ms(d.start_time),
                created=_from_epoch_ms(d.created),
                last_picked=_from_epoch_ms(d.last_picked),
                draft_order=order,
            )
        )
    return out


def derive_draft_board(picks: Any, users: Any, rosters: Any = None) -> list[DraftPickView]:
    """Picks in draft order with the picking manager resolved."""
    pick_list = coerce_records(Pick, picks)
    if not pick_list:
        return []
    by_id = index_users(coerce_records(User, users) or [])
    rosters_by_id = {r.roster_id: r for r in coerce_records(Roster, rosters or []) or []}

    out = []
    for p in sorted(pick_list, key=lambda x: x.pick_no):
        user = by_id.get(p.picked_by or "") or owner_of(rosters_by_id.get(p.roster_id), by_id)
        meta = p.metadata or {}
        name = " ".join(str(x) for x in (meta.get("first_name"), meta.get("last_name")) if x)
        out.append(
            DraftPickView(
                round=p.round,
                pick_no=p.pick_no,
                roster_id=p.roster_id,
                player_id=p.player_id,
                player_name=name or (p.player_id or "-"),
                position=meta.get("position"),
                nfl_team=meta.get("team"),
                manager=(user and user.display_name) or "Unknown",
            )
        )
    return out
