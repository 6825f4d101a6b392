from behave import given, then, when

from actionkit import ConfigurationError, Harness
from tests.fakes import actions

REAL_RESULTS = {"ChildAction": "child", "OtherAction": "other"}
POSITIONS = {"ChildAction": 0, "OtherAction": 1}


def action_type(name: str) -> type:
    return getattr(actions, name)


def action_types(names: str) -> list[type]:
    return [action_type(name.strip()) for name in names.split(",")]


def record_results(context):
    def callback(results: list) -> None:
        context.callback_calls += 1
        context.results = results

    return callback


@given('a harness around "{name}"')
def step_harness_around(context, name: str) -> None:
    context.harness = Harness(action_type(name)())


@given("the harness measures the root action")
def step_measure_root(context) -> None:
    context.harness.measure(record_results(context))


@given('the harness measures "{names}"')
def step_measure_targets(context, names: str) -> None:
    context.harness.measure(action_types(names), record_results(context))


@given('the harness only allows "{names}"')
def step_only(context, names: str) -> None:
    context.harness.only(action_types(names))


@given('the harness stubs "{name}" returning "{value}"')
def step_without_value(context, name: str, value: str) -> None:
    context.harness.without({action_type(name): value})


@given('the harness captures queries of "{names}"')
def step_queries_targets(context, names: str) -> None:
    context.harness.queries(action_types(names), record_results(context))


@when("the harness is handled")
def step_handle(context) -> None:
    try:
        context.result = context.harness.handle()
    except Exception as e:
        context.error = e


@when('the harness measures "{name}" without a callback')
def step_measure_without_callback(context, name: str) -> None:
    try:
        context.harness.measure([action_type(name)])
    except ConfigurationError as e:
        context.error = e


@then('the result is "{expected}"')
def step_result_is(context, expected: str) -> None:
    assert context.error is None, f"Unexpected error: {context.error!r}"
    assert context.result == expected, f"Expected {expected!r}, got {context.result!r}"


@then('the callback was invoked once with {count:d} result for "{name}"')
def step_callback_once(context, count: int, name: str) -> None:
    assert context.callback_calls == 1, f"Callback invoked {context.callback_calls} times"
    assert len(context.results) == count
    assert all(result.subject == name for result in context.results)


@then('"{name}" ran for real')
def step_ran_for_real(context, name: str) -> None:
    assert context.error is None, f"Unexpected error: {context.error!r}"
    assert context.result[POSITIONS[name]] == REAL_RESULTS[name]


@then('"{name}" was replaced by a stub')
def step_replaced_by_stub(context, name: str) -> None:
    assert context.result[POSITIONS[name]] is None


@then('"{name}" returned "{value}"')
def step_returned(context, name: str, value: str) -> None:
    assert context.result[POSITIONS[name]] == value


@then('the measured subjects are "{names}"')
def step_measured_subjects(context, names: str) -> None:
    expected = [name.strip() for name in names.split(",")]
    assert [m.subject for m in context.results] == expected, context.results


@then('{count:d} queries were captured for "{name}"')
def step_queries_captured(context, count: int, name: str) -> None:
    assert len(context.results) == count
    assert {query.action for query in context.results} == {name}


@then('the error "{message}" propagated')
def step_error_propagated(context, message: str) -> None:
    assert context.error is not None, "Expected an error"
    assert str(context.error) == message


@then("the callback was not invoked")
def step_callback_not_invoked(context) -> None:
    assert context.callback_calls == 0


@then("a configuration error was raised")
def step_configuration_error(context) -> None:
    assert isinstance(context.error, ConfigurationError), repr(context.error)
