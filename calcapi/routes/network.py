"""Network routes — IPv4 subnet calculator."""

import logging

from fastapi import APIRouter, HTTPException

from calcapi.models import SubnetRequest, SubnetResponse
from calcengine.errors import FormatError
from calcengine.subnet import compute_subnet, parse_address, parse_cidr

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/network/subnet", response_model=SubnetResponse)
async def subnet_endpoint(request: SubnetRequest):
    """Derive mask, network, broadcast and host range for an address."""
    try:
        if "/" in request.ip_address:
            address, prefix = parse_cidr(request.ip_address)
            if request.cidr is not None and request.cidr != prefix:
                raise HTTPException(
                    status_code=400,
                    detail=f"Prefix /{prefix} in ip_address conflicts with cidr={request.cidr}.",
                )
        else:
            if request.cidr is None:
                raise HTTPException(status_code=400, detail="cidr is required when ip_address has no /prefix.")
            address, prefix = parse_address(request.ip_address), request.cidr

        report = compute_subnet(address, prefix)
    except HTTPException:
        raise
    except FormatError as e:
        logger.info("Rejected subnet input %r: %s", request.ip_address, e)
        raise HTTPException(status_code=400, detail=str(e))

    return SubnetResponse(
        ip_address=report.address,
        cidr=report.cidr,
        subnet_mask=report.subnet_mask,
        wildcard_mask=report.wildcard_mask,
        network_address=report.network_address,
        broadcast_address=report.broadcast_address,
        host_range_start=report.host_range_start,
        host_range_end=report.host_range_end,
        total_hosts=report.total_hosts,
        usable_hosts=report.usable_hosts,
    )
