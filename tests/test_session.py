from types import SimpleNamespace

import pytest

from src import session as hill
from src.hill import codec
from src.hill.config import HillChartConfig
from src.hill_view import CURVE_HILL, CURVE_ITEMS, CURVE_TARGETS


@pytest.fixture
def url(monkeypatch):
    params = {}

    def _set(key, value):
        if value:
            params[key] = value
        else:
            params.pop(key, None)

    monkeypatch.setattr(hill, "set_query_param", _set)
    return params


@pytest.fixture
def config():
    return HillChartConfig(
        chart_width=800,
        chart_height=320,
        amplitude_ratio=0.6,
        hit_radius=30.0,
        stale_after_days=2,
        refresh_seconds=0,
        state_param="state",
        log_level="INFO",
    )


@pytest.fixture
def session(config, url):
    return hill.create_session(config)


def _point(curve, index, x, y, customdata=None):
    return {"curve_number": curve, "point_index": index, "x": x, "y": y, "customdata": customdata}


def _item_point(session, item_id, index=0):
    item = session.store.get_item(item_id)
    x, y = session.geometry.point_for(item.progress)
    return _point(CURVE_ITEMS, index, x, y, item_id)


def _target_point(session, progress):
    x, y = session.geometry.point_for(progress)
    return _point(CURVE_TARGETS, int(round(progress * 100)), x, y, progress)


def test_mutations_write_token_to_url(session, url):
    assert hill.add_item(session, "  Plan  ")
    token = url["state"]
    [item] = codec.decode(token)
    assert item.title == "Plan"
    hill.remove_item(session, item.id)
    assert "state" not in url


def test_blank_titles_are_ignored(session, url):
    assert not hill.add_item(session, "   ")
    assert len(session.store) == 0


def test_restore_from_token(config, url):
    source = hill.create_session(config)
    hill.add_item(source, "a")
    hill.add_item(source, "b")
    token = url["state"]

    restored = hill.create_session(config, token)
    assert [i.title for i in restored.store.list_items()] == ["a", "b"]
    assert restored.notices == []


def test_bad_token_is_cleared(config, url):
    url["state"] = "garbage!!"
    restored = hill.create_session(config, "garbage!!")
    assert len(restored.store) == 0
    assert "state" not in url
    assert restored.notices


def test_click_item_then_target_moves_it(session):
    hill.add_item(session, "a")
    [item] = session.store.list_items()

    assert hill.apply_selection(session, [_item_point(session, item.id)]) is None
    assert session.controller.dragging_id == item.id

    release = hill.apply_selection(session, [_target_point(session, 0.4)])
    assert release.item_id == item.id
    assert session.store.get_item(item.id).progress == pytest.approx(0.4)
    assert session.controller.dragging_id is None
    assert session.pending_delete is None


def test_repeated_selection_is_ignored(session):
    hill.add_item(session, "a")
    [item] = session.store.list_items()
    point = _item_point(session, item.id)
    hill.apply_selection(session, [point])
    # Streamlit reports the same selection again on the next rerun
    assert hill.apply_selection(session, [point]) is None
    assert session.controller.dragging_id == item.id


def test_cleared_selection_resets_dedupe(session):
    hill.apply_selection(session, [_point(CURVE_TARGETS, 3, 24.0, 300.0)])
    hill.apply_selection(session, [])
    assert session.last_selection is None


def test_clicks_on_the_curve_line_are_ignored(session):
    hill.add_item(session, "a")
    hill.apply_selection(session, [_point(CURVE_HILL, 0, 0.0, 320.0)])
    assert session.controller.state == "idle"


def test_drop_at_end_asks_for_delete(session):
    hill.add_item(session, "a")
    [item] = session.store.list_items()
    hill.apply_selection(session, [_item_point(session, item.id)])
    release = hill.drop_at(session, 1.0)
    assert release.finished
    assert session.pending_delete == item.id
    # deletion only happens once confirmed
    assert item.id in session.store
    assert hill.remove_item(session, item.id)
    assert not hill.remove_item(session, item.id)


def test_drop_and_cancel_while_idle(session):
    assert hill.drop_at(session, 0.5) is None
    hill.cancel_drag(session)
    assert session.controller.state == "idle"


def test_cancel_keeps_progress(session):
    hill.add_item(session, "a")
    [item] = session.store.list_items()
    hill.apply_selection(session, [_item_point(session, item.id)])
    hill.cancel_drag(session)
    assert session.store.get_item(item.id).progress == 0.0
    assert session.controller.state == "idle"


def test_selection_points_shapes():
    points = [{"x": 1}]
    assert hill.selection_points({"selection": {"points": points}}) == points
    assert hill.selection_points(SimpleNamespace(selection=SimpleNamespace(points=points))) == points
    assert hill.selection_points(None) == []
