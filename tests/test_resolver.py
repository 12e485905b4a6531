from event_visualizer.models.ast_models import CallSite, Expression, ExpressionKind, ResolvedCall
from event_visualizer.resolver import dispatched_class, receiver_matches, resolve, resolve_receiver

FACADE = "Illuminate\\Support\\Facades\\Event"


def _site(receiver, method="dispatch", arguments=(), position=0):
    return CallSite(receiver_token=receiver, method_name=method, arguments=tuple(arguments),
                    position=position, line=position, col=8)


def _new(class_name):
    return Expression(ExpressionKind.CONSTRUCTION, f"new {class_name}()", class_name)


def test_resolve_receiver_rules():
    table = {"Event": FACADE, "Alias": FACADE}

    assert resolve_receiver("\\Event", table) == "Event"
    assert resolve_receiver("\\Illuminate\\Support\\Facades\\Event", table) == FACADE
    assert resolve_receiver("Alias", table) == FACADE
    assert resolve_receiver("Event", table) == FACADE
    assert resolve_receiver("SelfDispatching", table) == "SelfDispatching"


def test_dispatched_class_prefers_constructed_argument():
    site = _site("Event", arguments=[_new("\\App\\Events\\A"), _new("\\App\\Events\\B")])

    assert dispatched_class(FACADE, site) == "App\\Events\\A"


def test_dispatched_class_uses_bound_variable():
    site = _site("Event", arguments=[Expression(ExpressionKind.VARIABLE, "$e", "App\\Events\\A")])

    assert dispatched_class(FACADE, site) == "App\\Events\\A"


def test_dispatched_class_falls_back_to_subject():
    unbound = _site("Event", arguments=[Expression(ExpressionKind.VARIABLE, "$e")])
    literal = _site("Event", arguments=[Expression(ExpressionKind.OTHER, "true"), _new("App\\Events\\A")])

    assert dispatched_class(FACADE, unbound) == FACADE
    assert dispatched_class(FACADE, literal) == FACADE
    assert dispatched_class(FACADE, _site("Event")) == FACADE


def test_resolve_filters_by_class_and_method_and_keeps_order():
    sites = [
        _site("Event", arguments=[_new("\\App\\Events\\A")], position=0),
        _site("Event", method="listen", arguments=[_new("\\App\\Events\\B")], position=1),
        _site("Other", arguments=[_new("\\App\\Events\\C")], position=2),
        _site("\\Illuminate\\Support\\Facades\\Event", arguments=[_new("\\App\\Events\\D")], position=3),
        _site("Event", arguments=[_new("\\App\\Events\\A")], position=4),
    ]

    calls = resolve(FACADE, "dispatch", {"Event": FACADE}, sites)

    assert calls == [
        ResolvedCall(FACADE, "App\\Events\\A", "dispatch"),
        ResolvedCall(FACADE, "App\\Events\\D", "dispatch"),
        ResolvedCall(FACADE, "App\\Events\\A", "dispatch"),
    ]


def test_resolve_orders_by_position():
    sites = [
        _site("Event", arguments=[_new("App\\Events\\B")], position=7),
        _site("Event", arguments=[_new("App\\Events\\A")], position=3),
    ]

    calls = resolve("Event", "dispatch", {}, sites)

    assert [c.dispatched_class for c in calls] == ["App\\Events\\A", "App\\Events\\B"]


def test_matching_is_case_sensitive():
    assert resolve("Event", "dispatch", {}, [_site("event"), _site("Event", method="Dispatch")]) == []


def test_no_call_sites_is_not_an_error():
    assert resolve(FACADE, "dispatch", {"Event": FACADE}, []) == []


def test_bare_receiver_matches_subject_spelled_the_same_way():
    table = {"DispatchableJob": "App\\Domain\\Job\\DispatchableJob"}

    assert receiver_matches("DispatchableJob", "DispatchableJob", table)
    assert receiver_matches("DispatchableJob", "App\\Domain\\Job\\DispatchableJob", table)
    assert not receiver_matches("\\DispatchableJob", "App\\Domain\\Job\\DispatchableJob", table)
    assert not receiver_matches("\\Event", FACADE, {"Event": FACADE})


def test_job_imported_under_its_short_name_dispatches_itself():
    table = {"DispatchableJob": "App\\Domain\\Job\\DispatchableJob"}
    sites = [_site("DispatchableJob", arguments=[Expression(ExpressionKind.VARIABLE, "$param1")])]

    assert resolve("DispatchableJob", "dispatch", table, sites) == [
        ResolvedCall("DispatchableJob", "DispatchableJob", "dispatch")
    ]
    assert resolve("App\\Domain\\Job\\DispatchableJob", "dispatch", table, sites) == [
        ResolvedCall("App\\Domain\\Job\\DispatchableJob", "App\\Domain\\Job\\DispatchableJob", "dispatch")
    ]
