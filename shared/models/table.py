"""
Single DynamoDB table access shared by the media, album and face models
"""
from typing import Dict, List, Any
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from ..config import config
from ..constants import BatchConstants
from ..error_handler import error_handler
from ..exceptions import DynamoDBError
from ..logger import logger
from ..utils import chunk_list

_dynamodb = None
_table = None


def get_resource():
    """Lazily bind the DynamoDB service resource so warm invocations reuse it"""
    global _dynamodb
    if _dynamodb is None:
        _dynamodb = boto3.resource('dynamodb', region_name=config.aws_region)
    return _dynamodb


def get_table():
    global _table
    if _table is None:
        _table = get_resource().Table(config.table_name)
    return _table


def reset_table():
    """Drop the cached table resource (tests switch AWS mocks between cases)"""
    global _dynamodb, _table
    _dynamodb = None
    _table = None


def create_table():
    """
    Create the single table with PK/SK string keys and a change stream.
    Used for local bootstrapping and tests; deployments create it from infrastructure code.
    """
    dynamodb = boto3.resource('dynamodb', region_name=config.aws_region)
    table = dynamodb.create_table(
        TableName=config.table_name,
        KeySchema=[
            {'AttributeName': 'PK', 'KeyType': 'HASH'},
            {'AttributeName': 'SK', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'PK', 'AttributeType': 'S'},
            {'AttributeName': 'SK', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST',
        StreamSpecification={'StreamEnabled': True, 'StreamViewType': 'NEW_AND_OLD_IMAGES'}
    )
    table.wait_until_exists()
    reset_table()
    return table


def raise_database_error(error: Exception, operation: str, **context):
    """Log a failed table operation and raise it as a DynamoDBError"""
    table_name = config.table_name
    logger.log_database_operation(
        table_name=table_name,
        operation=operation,
        success=False,
        error=str(error),
        **context
    )
    error_response = error_handler.handle_dynamodb_error(error, operation, table_name)
    raise DynamoDBError(
        error_response['error_message'],
        operation,
        table_name,
        str(error),
        status_code=error_response['status_code']
    ) from error


def is_condition_failure(error: Exception) -> bool:
    return (
        isinstance(error, ClientError)
        and error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'
    )


def batch_put(items: List[Dict[str, Any]], operation: str) -> int:
    """
    Put items through the table's batch writer, which buffers them into
    25-item requests and resends unprocessed items

    Returns:
        Number of items written
    """
    table = get_table()
    try:
        with table.batch_writer(overwrite_by_pkeys=['PK', 'SK']) as batch:
            for item in items:
                batch.put_item(Item=item)
    except (ClientError, BotoCoreError) as e:
        raise_database_error(e, operation, item_count=len(items))

    logger.log_database_operation(
        table_name=table.name,
        operation=operation,
        success=True,
        item_count=len(items)
    )
    return len(items)


def batch_delete(keys: List[Dict[str, str]], operation: str) -> int:
    """Delete items by PK/SK through the table's batch writer; repeated keys are collapsed"""
    table = get_table()
    try:
        with table.batch_writer(overwrite_by_pkeys=['PK', 'SK']) as batch:
            for key in keys:
                batch.delete_item(Key={'PK': key['PK'], 'SK': key['SK']})
    except (ClientError, BotoCoreError) as e:
        raise_database_error(e, operation, key_count=len(keys))

    logger.log_database_operation(
        table_name=table.name,
        operation=operation,
        success=True,
        item_count=len(keys)
    )
    return len(keys)


def batch_get(keys: List[Dict[str, str]], operation: str) -> List[Dict[str, Any]]:
    """Fetch items by key in groups of 100, following UnprocessedKeys"""
    table = get_table()
    items = []

    for chunk in chunk_list(keys, BatchConstants.DYNAMODB_BATCH_GET_SIZE):
        request_items = {table.name: {'Keys': chunk}}
        try:
            while request_items:
                response = get_resource().batch_get_item(RequestItems=request_items)
                items.extend(response.get('Responses', {}).get(table.name, []))
                request_items = response.get('UnprocessedKeys')
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, operation, key_count=len(chunk))

    logger.log_database_operation(
        table_name=table.name,
        operation=operation,
        success=True,
        requested=len(keys),
        found=len(items)
    )
    return items
