import pytest

from actionkit import Action, EventNotDeclaredError, emits_events
from actionkit.core.context import entering
from actionkit.core.events import get_event_bus, shutdown_event_bus
from actionkit.core.handles_events import HandlesEvents
from tests.fakes.actions import (
    MiddleManAction,
    ReportingAction,
    TestAction,
    TopAction,
)


@emits_events("started", "completed", "failed")
class Job(HandlesEvents):
    pass


class Unannounced(HandlesEvents):
    pass


@emits_events("ping")
class Bouncer(Action):
    def handle(self) -> None:
        self.emit("ping", "hello")


class TestDeclaredEventsOnInstances:
    def test_on_and_emit(self) -> None:
        received = []

        job = Job().on("started", received.append)
        job.emit("started", {"step": 1})

        assert received == [{"step": 1}]

    def test_emit_without_subscribers_is_noop(self) -> None:
        job = Job()

        assert job.emit("completed") is job

    def test_listen_is_alias_of_on(self) -> None:
        received = []

        Job().listen("failed", received.append).emit("failed", "boom")

        assert received == ["boom"]

    def test_same_type_instances_are_isolated(self) -> None:
        first, second = Job(), Job()
        received = []

        first.on("started", received.append)
        second.emit("started", "second")

        assert received == []

    def test_emit_undeclared_suggests_closest(self) -> None:
        with pytest.raises(EventNotDeclaredError) as exc_info:
            Job().emit("complted")

        error = exc_info.value
        assert str(error) == "Cannot emit event 'complted'. Did you mean: 'completed'?"
        assert error.event == "complted"
        assert error.suggestion == "completed"
        assert error.declared == ("started", "completed", "failed")

    def test_listen_undeclared_lists_allowed(self) -> None:
        with pytest.raises(EventNotDeclaredError) as exc_info:
            Job().on("zzzzzzzzz", print)

        assert str(exc_info.value) == (
            "Cannot listen for event 'zzzzzzzzz'. Allowed: started, completed, failed"
        )
        assert exc_info.value.suggestion is None

    def test_type_without_declaration_rejects_everything(self) -> None:
        with pytest.raises(EventNotDeclaredError, match=r"Allowed: \(none\)"):
            Unannounced().emit("anything")

    def test_suggestion_distance_from_settings(self, config_file) -> None:
        config_file.write_text("events:\n  suggestion_distance: 0\n")

        with pytest.raises(EventNotDeclaredError, match="Allowed"):
            Job().emit("complted")

    def test_failed_emit_publishes_nothing(self) -> None:
        job = Job()
        before = len(get_event_bus().recent_events(limit=50))

        with pytest.raises(EventNotDeclaredError):
            job.emit("nope")

        assert len(get_event_bus().recent_events(limit=50)) == before


class TestLifecycle:
    def test_dispose_removes_subscriptions(self) -> None:
        job = Job().on("started", print).on("failed", print)

        job.dispose()

        assert get_event_bus().subscriber_count(job.identity) == 0

    def test_context_manager_disposes(self) -> None:
        with Job() as job:
            job.on("started", print)
            identity = job.identity

        assert get_event_bus().subscriber_count(identity) == 0

    def test_dispose_after_shutdown_is_safe(self) -> None:
        job = Job().on("started", print)

        shutdown_event_bus()
        job.dispose()

    def test_record_memory_without_bus_is_noop(self) -> None:
        shutdown_event_bus()

        Job().record_memory("checkpoint")


class TestForwarding:
    def test_forward_to_declaring_caller(self) -> None:
        received = []

        result = MiddleManAction().on("progress", received.append).handle()

        assert result == "reported"
        assert received == [50]

    def test_only_selected_events_are_forwarded(self) -> None:
        reporter = ReportingAction().forward_events(["progress"])

        assert reporter.forwarded_events == ("progress",)
        assert ReportingAction().forwarded_events == ()

    def test_forward_all_declared_events(self) -> None:
        assert ReportingAction().forward_events().forwarded_events == ("progress", "done")

    def test_forward_rejects_undeclared_names(self) -> None:
        with pytest.raises(EventNotDeclaredError, match="Cannot forward event 'progres'"):
            ReportingAction().forward_events(["progres"])

    def test_forwarding_stops_at_non_declaring_ancestor(self) -> None:
        received = []

        TopAction().on("progress", received.append).handle()

        assert received == []

    def test_without_forwarding_caller_hears_nothing(self) -> None:
        received = []

        @emits_events("progress")
        class Quiet(Action):
            def handle(self) -> str:
                return ReportingAction.make().handle()

        Quiet().on("progress", received.append).handle()

        assert received == []

    def test_forwarding_from_outside_an_action_goes_nowhere(self) -> None:
        received = []
        reporter = ReportingAction().forward_events()
        reporter.on("progress", received.append)

        reporter.handle()

        assert received == [50]

    def test_propagation_cycle_is_cut(self) -> None:
        parent = Bouncer().forward_events()
        child = Bouncer().forward_events()
        heard = []

        def bounce(data) -> None:
            heard.append(data)
            with entering(child):
                child.emit("ping", data)

        parent.on("ping", bounce)

        with entering(parent):
            child.handle()

        assert heard == ["hello"]

    def test_emitting_reserved_test_action_events(self) -> None:
        received = []

        TestAction().on("a", received.append).on("b", received.append).handle()

        assert received == ["first", "second"]
