import pytest
from awslabs.aws_service_client.core.aws.transport import HttpTransport
from botocore.awsrequest import AWSRequest
from botocore.exceptions import EndpointConnectionError
from tests.fixtures import make_response
from unittest.mock import MagicMock


def make_request():
    return AWSRequest(method='POST', url='https://dynamodb.us-east-1.amazonaws.com/', data=b'{}')


@pytest.fixture
def http_session():
    """Create a mock HTTP session answering every request with a 200 response."""
    session = MagicMock()
    session.send.return_value = make_response(200, {'ok': True})
    return session


def test_sync_send_returns_completed_future(http_session):
    """Test that synchronous sends return an already completed future."""
    transport = HttpTransport(http_session=http_session)

    future = transport.send(make_request())

    assert future.done()
    assert future.result().status_code == 200
    http_session.send.assert_called_once()


def test_hooks_run_in_order_before_transmission(http_session):
    """Test that before-send hooks run in order on the request being sent."""
    transport = HttpTransport(http_session=http_session)
    calls = []
    request = make_request()

    def first(req):
        calls.append(('first', http_session.send.called))
        req.headers['X-First'] = '1'

    def second(req):
        calls.append(('second', req.headers.get('X-First')))

    transport.send(request, [first, second])

    assert calls == [('first', False), ('second', '1')]
    prepared = http_session.send.call_args[0][0]
    assert prepared.headers['X-First'] == '1'


def test_sync_send_failure_is_set_on_future(http_session):
    """Test that transport failures are signalled through the future."""
    failure = EndpointConnectionError(endpoint_url='https://dynamodb.us-east-1.amazonaws.com/')
    http_session.send.side_effect = failure
    transport = HttpTransport(http_session=http_session)

    future = transport.send(make_request())

    assert future.exception() is failure


def test_error_status_is_not_a_transport_failure(http_session):
    """Test that non-successful status codes still resolve to the response."""
    http_session.send.return_value = make_response(500, b'')
    transport = HttpTransport(http_session=http_session)

    future = transport.send(make_request())

    assert future.result().status_code == 500


def test_async_send_runs_on_thread_pool(http_session):
    """Test that asynchronous sends resolve from the thread pool."""
    transport = HttpTransport(http_session=http_session, max_workers=2)

    future = transport.send(make_request(), asynchronous=True)

    assert future.result(timeout=5).status_code == 200
    transport.close()


def test_close_releases_resources(http_session):
    """Test that closing shuts down the pool and the HTTP session."""
    transport = HttpTransport(http_session=http_session)
    transport.send(make_request(), asynchronous=True).result(timeout=5)

    transport.close()
    transport.close()

    assert http_session.close.call_count == 2
