import json
from awslabs.aws_service_client.client import Client
from awslabs.aws_service_client.core.aws.services import ServiceDescription
from awslabs.aws_service_client.core.aws.transport import Transport
from botocore.awsrequest import AWSResponse
from concurrent.futures import Future
from copy import deepcopy


TEST_REGION = 'us-east-1'
TEST_REQUEST_ID = 'REQ-1234'

TEST_CREDENTIALS = {
    'access_key_id': 'AKIDEXAMPLE',
    'secret_access_key': 'wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY',
    'session_token': 'session-token',
}

THINGS_SERVICE_MODEL = {
    'version': '2.0',
    'metadata': {
        'apiVersion': '2012-08-10',
        'endpointPrefix': 'dynamodb',
        'jsonVersion': '1.0',
        'protocol': 'json',
        'serviceFullName': 'Amazon DynamoDB',
        'serviceId': 'DynamoDB',
        'signatureVersion': 'v4',
        'targetPrefix': 'DynamoDB_20120810',
        'uid': 'dynamodb-2012-08-10',
    },
    'operations': {
        'GetItem': {
            'name': 'GetItem',
            'http': {'method': 'POST', 'requestUri': '/'},
            'input': {'shape': 'GetItemInput'},
            'output': {'shape': 'GetItemOutput'},
            'errors': [{'shape': 'ResourceNotFoundException'}],
        },
        'ListThings': {
            'name': 'ListThings',
            'http': {'method': 'POST', 'requestUri': '/'},
            'input': {'shape': 'ListThingsInput'},
            'output': {'shape': 'ListThingsOutput'},
        },
        'DescribeThing': {
            'name': 'DescribeThing',
            'http': {'method': 'POST', 'requestUri': '/'},
            'input': {'shape': 'DescribeThingInput'},
            'output': {'shape': 'DescribeThingOutput'},
            'errors': [{'shape': 'ResourceNotFoundException'}],
        },
    },
    'shapes': {
        'GetItemInput': {
            'type': 'structure',
            'required': ['TableName', 'Key'],
            'members': {
                'TableName': {'shape': 'TableName'},
                'Key': {'shape': 'AttributeMap'},
            },
        },
        'GetItemOutput': {
            'type': 'structure',
            'members': {'Item': {'shape': 'AttributeMap'}},
        },
        'AttributeMap': {
            'type': 'map',
            'key': {'shape': 'String'},
            'value': {'shape': 'AttributeValue'},
        },
        'AttributeValue': {
            'type': 'structure',
            'members': {
                'S': {'shape': 'String'},
                'N': {'shape': 'String'},
                'BOOL': {'shape': 'Boolean'},
            },
        },
        'ListThingsInput': {
            'type': 'structure',
            'members': {
                'Limit': {'shape': 'Integer'},
                'NextToken': {'shape': 'String'},
            },
        },
        'ListThingsOutput': {
            'type': 'structure',
            'members': {
                'Things': {'shape': 'ThingList'},
                'Count': {'shape': 'Integer'},
                'NextToken': {'shape': 'String'},
            },
        },
        'DescribeThingInput': {
            'type': 'structure',
            'required': ['Name'],
            'members': {'Name': {'shape': 'String'}},
        },
        'DescribeThingOutput': {
            'type': 'structure',
            'members': {'Thing': {'shape': 'Thing'}},
        },
        'Thing': {
            'type': 'structure',
            'members': {
                'Name': {'shape': 'String'},
                'Status': {'shape': 'String'},
            },
        },
        'ThingList': {'type': 'list', 'member': {'shape': 'String'}},
        'ResourceNotFoundException': {
            'type': 'structure',
            'members': {'message': {'shape': 'String'}},
            'exception': True,
        },
        'TableName': {'type': 'string', 'min': 3},
        'String': {'type': 'string'},
        'Integer': {'type': 'integer'},
        'Boolean': {'type': 'boolean'},
    },
}

THINGS_PAGINATORS = {
    'pagination': {
        'ListThings': {
            'input_token': 'NextToken',
            'output_token': 'NextToken',
            'limit_key': 'Limit',
            'result_key': 'Things',
        },
    },
}

THINGS_WAITERS = {
    'version': 2,
    'waiters': {
        'ThingReady': {
            'operation': 'DescribeThing',
            'delay': 0,
            'maxAttempts': 3,
            'acceptors': [
                {
                    'matcher': 'path',
                    'argument': 'Thing.Status',
                    'expected': 'DONE',
                    'state': 'success',
                },
                {
                    'matcher': 'path',
                    'argument': 'Thing.Status',
                    'expected': 'ERROR',
                    'state': 'failure',
                },
            ],
        },
        'ThingGone': {
            'operation': 'DescribeThing',
            'delay': 0,
            'maxAttempts': 2,
            'acceptors': [
                {
                    'matcher': 'error',
                    'expected': 'ResourceNotFoundException',
                    'state': 'success',
                },
            ],
        },
    },
}

EC2_SERVICE_MODEL = {
    'version': '2.0',
    'metadata': {
        'apiVersion': '2016-11-15',
        'endpointPrefix': 'ec2',
        'protocol': 'ec2',
        'serviceFullName': 'Amazon Elastic Compute Cloud',
        'serviceId': 'EC2',
        'signatureVersion': 'v4',
        'uid': 'ec2-2016-11-15',
    },
    'operations': {
        'CopySnapshot': {
            'name': 'CopySnapshot',
            'http': {'method': 'POST', 'requestUri': '/'},
            'input': {'shape': 'CopySnapshotRequest'},
            'output': {'shape': 'CopySnapshotResult'},
        },
        'DescribeSnapshots': {
            'name': 'DescribeSnapshots',
            'http': {'method': 'POST', 'requestUri': '/'},
            'input': {'shape': 'DescribeSnapshotsRequest'},
        },
    },
    'shapes': {
        'CopySnapshotRequest': {
            'type': 'structure',
            'required': ['SourceRegion', 'SourceSnapshotId'],
            'members': {
                'Description': {'shape': 'String'},
                'DestinationRegion': {'shape': 'String'},
                'PresignedUrl': {'shape': 'String'},
                'SourceRegion': {'shape': 'String'},
                'SourceSnapshotId': {'shape': 'String'},
            },
        },
        'CopySnapshotResult': {
            'type': 'structure',
            'members': {'SnapshotId': {'shape': 'String', 'locationName': 'snapshotId'}},
        },
        'DescribeSnapshotsRequest': {
            'type': 'structure',
            'members': {'OwnerIds': {'shape': 'String'}},
        },
        'String': {'type': 'string'},
    },
}


class FakeRaw:
    """Raw HTTP body exposing the ``stream`` method botocore reads responses with."""

    def __init__(self, body: bytes):
        self._body = body

    def stream(self, **kwargs):
        yield self._body


def make_response(status_code=200, body=None, headers=None, url='https://example.com/'):
    """Build a botocore response with a JSON (or raw bytes) body."""
    if body is None:
        content = b''
    elif isinstance(body, bytes):
        content = body
    else:
        content = json.dumps(body).encode('utf-8')
    response_headers = {
        'x-amzn-requestid': TEST_REQUEST_ID,
        'content-type': 'application/x-amz-json-1.0',
    }
    response_headers.update(headers or {})
    return AWSResponse(url, status_code, response_headers, FakeRaw(content))


def not_found_response(message='Table not found'):
    """Build the error response DynamoDB returns for a missing resource."""
    return make_response(
        400,
        {
            '__type': 'com.amazonaws.dynamodb.v20120810#ResourceNotFoundException',
            'message': message,
        },
    )


def thing_response(status):
    """Build a DescribeThing response with the given status."""
    return make_response(200, {'Thing': {'Name': 'thing', 'Status': status}})


class FakeTransport(Transport):
    """Transport replaying scripted responses (or exceptions) without opening sockets."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []
        self.closed = False

    def send(self, request, before_send=(), asynchronous=False):
        future = Future()
        future.set_running_or_notify_cancel()
        try:
            for hook in before_send:
                hook(request)
            self.requests.append(request)
            outcome = self.outcomes.pop(0)
            if isinstance(outcome, BaseException):
                raise outcome
            future.set_result(outcome)
        except Exception as error:
            future.set_exception(error)
        return future

    def close(self):
        self.closed = True


class PendingTransport(Transport):
    """Transport whose sends stay in flight until completed by the test."""

    def __init__(self):
        self.futures = []
        self.hooks = []

    def send(self, request, before_send=(), asynchronous=False):
        future = Future()
        self.futures.append((future, request))
        self.hooks.append(list(before_send))
        return future

    def complete(self, response, index=0):
        future, request = self.futures[index]
        for hook in self.hooks[index]:
            hook(request)
        future.set_running_or_notify_cancel()
        future.set_result(response)


def things_description():
    """Return the description of the synthetic DynamoDB-like service."""
    return ServiceDescription(
        deepcopy(THINGS_SERVICE_MODEL),
        paginators=deepcopy(THINGS_PAGINATORS),
        waiters=deepcopy(THINGS_WAITERS),
        service_name='dynamodb',
    )


def make_client(transport=None, **options):
    """Create a client for the synthetic DynamoDB-like service."""
    options.setdefault('api', things_description())
    options.setdefault('region', TEST_REGION)
    options.setdefault('credentials', TEST_CREDENTIALS)
    return Client(service='dynamodb', transport=transport or FakeTransport(), **options)


def make_ec2_client(transport=None, **options):
    """Create a client for the synthetic EC2-like service."""
    options.setdefault('api', ServiceDescription(deepcopy(EC2_SERVICE_MODEL), service_name='ec2'))
    options.setdefault('region', TEST_REGION)
    options.setdefault('credentials', TEST_CREDENTIALS)
    return Client(service='ec2', transport=transport or FakeTransport(), **options)
