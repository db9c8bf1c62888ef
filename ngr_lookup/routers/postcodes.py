"""Postcode lookup endpoint: postcode -> NGR + WGS84."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import RATE_LIMIT_LOOKUP
from ..exceptions import ConnectionFailed, EmptyPostcode, Offline, PostcodeNotFound
from ..lookup import lookup_postcode
from ..resolver import PostcodeResolver, get_resolver
from ..schemas import PostcodeLookupOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/postcodes", tags=["postcodes"])

limiter = Limiter(key_func=get_remote_address)


@router.get("/{postcode}", response_model=PostcodeLookupOut)
@limiter.limit(RATE_LIMIT_LOOKUP)
def lookup(
    request: Request,
    postcode: str,
    resolver: PostcodeResolver = Depends(get_resolver),
):
    """Resolve a postcode and convert its easting/northing.

    If the conversion fails the lookup still succeeds: ngrFormatted is
    "Calculation Error" and geoLat/geoLon are null.
    """
    try:
        result = lookup_postcode(postcode, resolver)
    except EmptyPostcode as e:
        raise HTTPException(status_code=422, detail=e.message)
    except PostcodeNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except Offline as e:
        raise HTTPException(status_code=503, detail=e.message)
    except ConnectionFailed as e:
        raise HTTPException(status_code=502, detail=e.message)

    if not result.converted:
        logger.info("Returning %s without a grid reference", result.postcode)
    return PostcodeLookupOut(**asdict(result))
