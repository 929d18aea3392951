import pytest
from awslabs.aws_service_client.core.aws.waiter import Waiter
from awslabs.aws_service_client.core.common.errors import (
    InvalidConfigurationError,
    WaiterError,
    WaiterFailureError,
    WaiterNotSupportedError,
    WaiterTimeoutError,
)
from awslabs.aws_service_client.services.dynamodb.exceptions import DynamoDbException
from concurrent.futures import CancelledError
from tests.fixtures import FakeTransport, make_client, not_found_response, thing_response


THING = {'Name': 'thing'}


def test_waiter_succeeds():
    """Test that polling stops when a success acceptor matches."""
    transport = FakeTransport(thing_response('PENDING'), thing_response('DONE'))
    client = make_client(transport)

    response = client.wait_until('ThingReady', THING)

    assert response['Thing']['Status'] == 'DONE'
    assert len(transport.requests) == 2


def test_waiter_name_is_case_normalized():
    """Test that waiters are found with the first letter upper-cased."""
    client = make_client(FakeTransport(thing_response('DONE')))

    waiter = client.get_waiter('thingReady', THING)

    assert waiter.name == 'ThingReady'
    assert waiter.operation_name == 'DescribeThing'


def test_waiter_failure_state():
    """Test that a failure acceptor ends the wait with a failure error."""
    transport = FakeTransport(thing_response('PENDING'), thing_response('ERROR'))
    client = make_client(transport)

    with pytest.raises(WaiterFailureError) as exc_info:
        client.wait_until('ThingReady', THING)

    error = exc_info.value
    assert error.kind == 'failure'
    assert error.name == 'ThingReady'
    assert error.attempts == 2
    assert error.last_response['Thing']['Status'] == 'ERROR'
    assert 'terminal failure state' in str(error)


def test_waiter_times_out():
    """Test that the waiter gives up after the maximum number of attempts."""
    transport = FakeTransport(*[thing_response('PENDING') for _ in range(3)])
    client = make_client(transport)

    with pytest.raises(WaiterTimeoutError) as exc_info:
        client.wait_until('ThingReady', THING)

    error = exc_info.value
    assert isinstance(error, WaiterError)
    assert error.kind == 'timeout'
    assert error.attempts == 3
    assert 'Max attempts exceeded' in str(error)
    assert len(transport.requests) == 3


def test_max_attempts_can_be_overridden():
    """Test that the configured attempts override the waiter's defaults."""
    transport = FakeTransport(thing_response('PENDING'))
    client = make_client(transport)

    with pytest.raises(WaiterTimeoutError) as exc_info:
        client.wait_until('ThingReady', THING, config={'max_attempts': 1})

    assert exc_info.value.attempts == 1


def test_error_acceptor_matches_service_errors():
    """Test that error acceptors match the error code of a failed attempt."""
    client = make_client(FakeTransport(not_found_response()))

    response = client.wait_until('ThingGone', THING)

    assert response['Error']['Code'] == 'ResourceNotFoundException'


def test_unexpected_error_aborts_the_wait():
    """Test that errors no acceptor expects are raised immediately."""
    transport = FakeTransport(not_found_response(), thing_response('DONE'))
    client = make_client(transport)

    with pytest.raises(DynamoDbException) as exc_info:
        client.wait_until('ThingReady', THING)

    assert exc_info.value.error_code == 'ResourceNotFoundException'
    assert len(transport.requests) == 1


def test_async_waiter():
    """Test that started waiters resolve in the background."""
    client = make_client(FakeTransport(thing_response('PENDING'), thing_response('DONE')))

    waiter = client.wait_until('ThingReady', THING, is_async=True)

    assert isinstance(waiter, Waiter)
    assert waiter.wait(timeout=5)['Thing']['Status'] == 'DONE'
    assert waiter.done()
    assert waiter.attempts == 2


def test_async_waiter_failure_is_raised_by_wait():
    """Test that the terminal failure of a started waiter is raised by wait."""
    client = make_client(FakeTransport(thing_response('ERROR')))

    waiter = client.wait_until('ThingReady', THING, is_async=True)

    with pytest.raises(WaiterFailureError):
        waiter.wait(timeout=5)


def test_cancel_interrupts_the_delay():
    """Test that cancelling a started waiter stops it without waiting for the delay."""
    transport = FakeTransport(*[thing_response('PENDING') for _ in range(3)])
    client = make_client(transport)
    waiter = client.get_waiter('ThingReady', THING, {'delay': 60})

    waiter.start()
    assert waiter.cancel() is True
    waiter._thread.join(timeout=5)

    assert not waiter._thread.is_alive()
    assert waiter.cancelled()
    assert waiter.cancel() is False
    with pytest.raises(CancelledError):
        waiter.wait()
    assert len(transport.requests) <= 1


def test_cancel_twice_reports_the_first_cancel_only():
    """Test that a waiter cancelled once cannot be cancelled again."""
    client = make_client(FakeTransport())
    waiter = client.get_waiter('ThingReady', THING, {'delay': 60})

    assert waiter.cancel() is True
    assert waiter.cancel() is False
    assert waiter.cancelled()


def test_cancel_after_success_fails():
    """Test that a resolved waiter cannot be cancelled."""
    client = make_client(FakeTransport(thing_response('DONE')))
    waiter = client.get_waiter('ThingReady', THING)

    waiter.run()

    assert waiter.cancel() is False
    assert not waiter.cancelled()


def test_unknown_waiter():
    """Test that waiters missing from the service description are rejected."""
    transport = FakeTransport()
    client = make_client(transport)

    with pytest.raises(WaiterNotSupportedError):
        client.get_waiter('ThingDeleted')

    assert transport.requests == []


@pytest.mark.parametrize(
    'config,option',
    [
        ({'max_attempts': 0}, 'max_attempts'),
        ({'delay': -1}, 'delay'),
    ],
)
def test_invalid_waiter_config(config, option):
    """Test that invalid waiter settings are rejected before polling."""
    client = make_client()

    with pytest.raises(InvalidConfigurationError) as exc_info:
        client.get_waiter('ThingReady', THING, config)

    assert exc_info.value.option == option
