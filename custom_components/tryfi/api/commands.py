"""
Low-level write commands for TryFi collars.

Both the LED and the lost-dog mode are operation parameters of the collar
and are changed with the same mutation.
"""
import logging

import aiohttp

from custom_components.tryfi.api.graphql import graphql_request
from custom_components.tryfi.api.queries import UPDATE_OPERATION_PARAMS_MUTATION
from custom_components.tryfi.models import PetMode

_LOGGER = logging.getLogger(__name__)


async def update_operation_params(http: aiohttp.ClientSession, module_id: str, **params) -> dict:
    """Send updateDeviceOperationParams for one collar and return the response data."""
    variables = {"input": {"moduleId": module_id, **params}}
    data = await graphql_request(http, UPDATE_OPERATION_PARAMS_MUTATION, variables)
    _LOGGER.debug("Updated operation params %s for module %s", params, module_id)
    return data


async def set_led(http: aiohttp.ClientSession, module_id: str, enabled: bool) -> dict:
    return await update_operation_params(http, module_id, ledEnabled=enabled)


async def set_mode(http: aiohttp.ClientSession, module_id: str, lost: bool) -> dict:
    mode = PetMode.LOST_DOG if lost else PetMode.NORMAL
    return await update_operation_params(http, module_id, mode=mode.value)
