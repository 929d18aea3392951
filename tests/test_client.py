import json
import pytest
from awslabs.aws_service_client import Client, FutureResult, Result, create_client
from awslabs.aws_service_client.core.common.command import Command
from awslabs.aws_service_client.core.common.errors import InvalidConfigurationError
from tests.fixtures import (
    TEST_CREDENTIALS,
    FakeTransport,
    make_client,
    make_response,
    things_description,
)


ITEM_RESPONSE = {'Item': {'id': {'S': '1'}}}


def test_operations_are_exposed_as_methods():
    """Test that operations can be called by their Pythonic name."""
    transport = FakeTransport(make_response(200, ITEM_RESPONSE))
    client = make_client(transport)

    result = client.get_item(TableName='things', Key={'id': {'S': '1'}})

    assert isinstance(result, Result)
    assert result['Item'] == {'id': {'S': '1'}}
    assert transport.requests[0].headers['X-Amz-Target'] == 'DynamoDB_20120810.GetItem'


def test_operation_methods_accept_a_parameter_dict():
    """Test that parameters can be passed as a dict and merged with keywords."""
    transport = FakeTransport(make_response(200, ITEM_RESPONSE))
    client = make_client(transport)

    client.get_item({'TableName': 'things'}, Key={'id': {'S': '1'}})

    assert json.loads(transport.requests[0].data) == {
        'TableName': 'things',
        'Key': {'id': {'S': '1'}},
    }


def test_operation_methods_can_run_asynchronously():
    """Test that operation methods return a future when asked to."""
    client = make_client(FakeTransport(make_response(200, ITEM_RESPONSE)))

    future = client.getItem({'TableName': 'things', 'Key': {}}, is_async=True)

    assert isinstance(future, FutureResult)
    assert future.wait()['Item'] == {'id': {'S': '1'}}


@pytest.mark.parametrize('name', ['put_item', '_private', 'GETITEM'])
def test_unknown_attribute(name):
    """Test that names matching no operation raise AttributeError."""
    client = make_client()

    with pytest.raises(AttributeError):
        getattr(client, name)


def test_defaults_are_merged_into_parameters():
    """Test that client defaults apply unless the call overrides them."""
    transport = FakeTransport(make_response(200, ITEM_RESPONSE), make_response(200, ITEM_RESPONSE))
    client = make_client(transport, defaults={'TableName': 'things'})

    client.execute('GetItem', {'Key': {}})
    client.execute('GetItem', {'TableName': 'others', 'Key': {}})

    bodies = [json.loads(request.data) for request in transport.requests]
    assert bodies[0]['TableName'] == 'things'
    assert bodies[1]['TableName'] == 'others'


def test_prebuilt_commands_can_be_executed():
    """Test that a command built ahead of time runs in either mode."""
    transport = FakeTransport(make_response(200, ITEM_RESPONSE), make_response(200, ITEM_RESPONSE))
    client = make_client(transport)
    command = client.get_command('getItem', {'TableName': 'things', 'Key': {}})

    assert isinstance(command, Command)
    assert command.name == 'GetItem'
    assert command['TableName'] == 'things'
    assert client.execute(command)['Item'] == {'id': {'S': '1'}}
    assert client.execute_async(command).wait()['Item'] == {'id': {'S': '1'}}
    assert len(transport.requests) == 2


def test_client_properties():
    """Test that the client exposes its resolved configuration."""
    client = make_client()

    assert client.region == 'us-east-1'
    assert client.endpoint == 'https://dynamodb.us-east-1.amazonaws.com'
    assert client.api.service_name == 'dynamodb'
    assert client.credentials.access_key == TEST_CREDENTIALS['access_key_id']
    assert client.config.service == 'dynamodb'
    assert repr(client) == 'Client(dynamodb, us-east-1)'


def test_context_manager_closes_transport():
    """Test that leaving the context closes the transport."""
    transport = FakeTransport()

    with make_client(transport) as client:
        assert isinstance(client, Client)

    assert transport.closed


def test_create_client():
    """Test that clients are created from a service name and options."""
    transport = FakeTransport()

    client = create_client(
        'dynamodb',
        api=things_description(),
        region='eu-west-1',
        credentials=TEST_CREDENTIALS,
        transport=transport,
    )

    assert client.region == 'eu-west-1'
    assert client.endpoint == 'https://dynamodb.eu-west-1.amazonaws.com'


def test_invalid_options_fail_construction():
    """Test that client construction fails on invalid options."""
    with pytest.raises(InvalidConfigurationError):
        create_client(
            'dynamodb',
            api=things_description(),
            region='us-east-1',
            credentials=TEST_CREDENTIALS,
            endpoint='nope',
        )


def test_prebuilt_command_keeps_its_hooks_and_adds_new_ones():
    """Test that hooks given with a prebuilt command run after the command's own hooks."""
    calls = []
    transport = FakeTransport(make_response(200, ITEM_RESPONSE))
    client = make_client(transport)
    command = client.get_command(
        'GetItem',
        {'TableName': 'things', 'Key': {}},
        request_hooks=[lambda request: calls.append('own')],
    )

    client.execute(command, request_hooks=[lambda request: calls.append('extra')])

    assert calls == ['own', 'extra']
    assert len(command.request_hooks) == 1
