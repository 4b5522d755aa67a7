# hostel_api/infrastructure/security/device_fingerprint.py

import hashlib

from hostel_api.entities.session import DeviceInfo

UNKNOWN = "unknown"


def extract_device_info(user_agent: str | None, ip_address: str | None) -> DeviceInfo:
    # rótulo para listagem de sessões; não é fronteira de segurança
    ua = (user_agent or "").strip() or UNKNOWN
    ip = (ip_address or "").strip() or UNKNOWN

    fingerprint = hashlib.md5((ua + ip).encode("utf-8"), usedforsecurity=False).hexdigest()
    return DeviceInfo(user_agent=ua[:512], ip_address=ip[:64], fingerprint=fingerprint)
