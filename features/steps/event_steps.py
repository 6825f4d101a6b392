from behave import given, then, when

from actionkit import Action, EventNotDeclaredError, emits_events
from tests.fakes.actions import MiddleManAction


def declaring_action(*events: str) -> type:
    @emits_events(*events)
    class Declaring(Action):
        def handle(self) -> None:
            return None

    return Declaring


@given('an action declaring events "{first}" and "{second}"')
def step_declaring_action(context, first: str, second: str) -> None:
    context.action = declaring_action(first, second)()


@given('a subscriber on event "{event}"')
def step_subscriber(context, event: str) -> None:
    context.action.on(event, context.received.append)


@given('a second instance of the same action with a subscriber on event "{event}"')
def step_second_instance_subscriber(context, event: str) -> None:
    type(context.action)().on(event, context.received.append)


@given("a caller forwarding progress from the action it runs")
def step_forwarding_caller(context) -> None:
    context.action = MiddleManAction().on("progress", context.received.append)


@when('the action emits "{event}" with "{data}"')
def step_emit(context, event: str, data: str) -> None:
    try:
        context.action.emit(event, data)
    except EventNotDeclaredError as e:
        context.error = e


@when("the caller is handled")
def step_caller_handled(context) -> None:
    context.result = context.action.handle()


@then('the subscriber received "{data}" exactly once')
def step_received_once(context, data: str) -> None:
    assert context.received == [data], context.received


@then("the subscriber received nothing")
def step_received_nothing(context) -> None:
    assert context.received == [], context.received


@then("the caller's subscriber received {value:d}")
def step_caller_received(context, value: int) -> None:
    assert context.received == [value], context.received


@then('an undeclared event error mentions "{event}"')
def step_error_mentions(context, event: str) -> None:
    assert isinstance(context.error, EventNotDeclaredError), repr(context.error)
    assert f"'{event}'" in str(context.error)


@then("the error lists the allowed events")
def step_error_lists_allowed(context) -> None:
    message = str(context.error)
    assert "Allowed:" in message, message
    for event in context.error.declared:
        assert event in message


@then('the error suggests "{suggestion}"')
def step_error_suggests(context, suggestion: str) -> None:
    assert isinstance(context.error, EventNotDeclaredError), repr(context.error)
    assert context.error.suggestion == suggestion
    assert f"Did you mean: '{suggestion}'?" in str(context.error)
