"""Detection of web application firewalls from response headers and bodies."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache

__all__ = ["WAFPattern", "PATTERNS", "check_waf"]


@dataclass(frozen=True)
class WAFPattern:
    """A named firewall signature: regular expressions for the body and headers."""

    name: str
    body: str = ""
    header: str = ""


PATTERNS: tuple[WAFPattern, ...] = (
    WAFPattern("360 Web Application Firewall (360)", "/wzws-waf-cgi/", "X-Powered-By-360wzb"),
    WAFPattern("aeSecure", "aesecure_denied.png", "aeSecure-code"),
    WAFPattern("Airlock", "", "AL[_-]?(SESS|LB)"),
    WAFPattern("Anquanbao Web Application Firewall", "", "X-Powered-By-Anquanba"),
    WAFPattern(
        "Armor Protection (Armor Defense)",
        "This request has been blocked by website protection from Armor",
        "",
    ),
    WAFPattern(
        "Application Security Manager (F5 Networks)",
        "The requested URL was rejected. Please consult with your administrator.",
        "",
    ),
    WAFPattern("Amazon Web Services Web Application Firewall (Amazon)", "", "AWS"),
    WAFPattern("Yunjiasu Web Application Firewall (Baidu)", "", "yunjiasu-nginx"),
    WAFPattern(
        "Barracuda Web Application Firewall (Barracuda Networks)", "", "barra_counter_session="
    ),
    WAFPattern("BIG-IP Application Security Manager (F5 Networks)", "", "BigIP"),
    WAFPattern("BinarySEC Web Application Firewall (BinarySEC)", "", "binarysec"),
    WAFPattern("BlockDoS", "", "BlockDos.net"),
    WAFPattern("ChinaCache (ChinaCache Networks)", "", "Powered-By-ChinaCache"),
    WAFPattern("Cisco ACE XML Gateway (Cisco Systems)", "", "ACE XML Gateway"),
    WAFPattern("Cloudbric Web Application Firewall (Cloudbric)", "Cloudbric", ""),
    WAFPattern(
        "CloudFlare Web Application Firewall (CloudFlare)",
        "Attention Required!",
        "cloudflare|__cfduid=|cf-ray",
    ),
    WAFPattern("CloudFront (Amazon)", "", "Error from cloudfront"),
    WAFPattern("Comodo Web Application Firewall (Comodo)", "", "Protected by COMODO WAF"),
    WAFPattern("CrawlProtect (Jean-Denis Brun)", "This site is protected by CrawlProtect", ""),
    WAFPattern("IBM WebSphere DataPower (IBM)", "", "X-Backside-Transport"),
    WAFPattern(
        "Deny All Web Application Firewall (DenyAll)", "Condition Intercepted", "sessioncookie"
    ),
    WAFPattern(
        "Distil Web Application Firewall Security (Distil Networks)", "", "x-distil-cs"
    ),
    WAFPattern("DOSarrest (DOSarrest Internet Security)", "", "DOSarrest|X-DIS-Request-ID"),
    WAFPattern(
        "dotDefender (Applicure Technologies)",
        "dotDefender Blocked Your Request",
        "X-dotDefender-denied",
    ),
    WAFPattern("EdgeCast Web Application Firewall (Verizon)", "", "SERVER.*?ECDF"),
    WAFPattern("ExpressionEngine (EllisLab)", "Invalid (GET|POST) Data", ""),
    WAFPattern(
        "FortiWeb Web Application Firewall (Fortinet)", "", "FORTIWAFSID=|cookiesession1="
    ),
    WAFPattern("Hyperguard Web Application Firewall (art of defence)", "", "ODSESSION="),
    WAFPattern(
        "Incapsula Web Application Firewall (Incapsula/Imperva)",
        "",
        "X-Iinfo|incap_ses|visid_incap",
    ),
    WAFPattern(
        "ISA Server (Microsoft)",
        "The server denied the specified Uniform Resource Locator (URL)",
        "",
    ),
    WAFPattern(
        "Jiasule Web Application Firewall (Jiasule)", "", "jiasule-WAF|__jsluid=|jsl_tracking"
    ),
    WAFPattern("KS-WAF (Knownsec)", "ks-waf-error.png'", ""),
    WAFPattern("KONA Security Solutions (Akamai Technologies)", "", "AkamaiGHost"),
    WAFPattern(
        "ModSecurity: Open Source Web Application Firewall (Trustwave)", "", "Mod_Security|NOYB"
    ),
    WAFPattern("NAXSI (NBS System)", "", "NCI__SessionId="),
    WAFPattern("NetScaler (Citrix Systems)", "", "ns_af=|citrix_ns_id|NSC_|NS-CACHE"),
    WAFPattern("Newdefend Web Application Firewall (Newdefend)", "", "newdefend"),
    WAFPattern("NSFOCUS Web Application Firewall (NSFOCUS)", "", "NSFocus"),
    WAFPattern(
        "Palo Alto Firewall (Palo Alto Networks)",
        "has been blocked in accordance with company policy",
        "",
    ),
    WAFPattern("Profense Web Application Firewall (Armorlogic)", "", "PLBSID=|Profense"),
    WAFPattern("AppWall (Radware)", "Unauthorized Activity Has Been Detected", "X-SL-CompState"),
    WAFPattern(
        "Reblaze Web Application Firewall (Reblaze)", "", "rbzid=|Reblaze Secure Web Gateway"
    ),
    WAFPattern(
        "ASP.NET RequestValidationMode (Microsoft)",
        "ASP.NET has detected data in the request that is potentially dangerous"
        "|Request Validation has detected a potentially dangerous client input value"
        "|HttpRequestValidationException",
        "",
    ),
    WAFPattern("Safe3 Web Application Firewall", "", "Safe3"),
    WAFPattern("Safedog Web Application Firewall (Safedog)", "", "WAF/2.0|safedog"),
    WAFPattern(
        "SecureIIS Web Server Security (BeyondTrust)",
        "SecureIIS.*?Web Server Protection|http://www.eeye.com/SecureIIS/"
        "|?subject=[^>]*SecureIIS Error",
        "",
    ),
    WAFPattern("SEnginx (Neusoft Corporation)", "SENGINX-ROBOT-MITIGATION", ""),
    WAFPattern(
        "TrueShield Web Application Firewall (SiteLock)",
        "SiteLock Incident ID|sitelock-site-verification|sitelock_shield_logo",
        "",
    ),
    WAFPattern(
        "SonicWALL (Dell)",
        "This request is blocked by the SonicWALL|#shd|#nsa_banner|Web Site Blocked.*?nsa_banner",
        "SonicWALL",
    ),
    WAFPattern("UTM Web Protection (Sophos)", "Powered by UTM Web Protection", ""),
    WAFPattern("Stingray Application Firewall (Riverbed / Brocade)", "", "X-Mapping-"),
    WAFPattern(
        "CloudProxy WebSite Firewall (Sucuri)",
        "Access Denied.*?Sucuri Website Firewall|Sucuri WebSite Firewall.*?Access Denied"
        "|Questions?.*?[email]",
        "Sucuri/Cloudproxy|X-Sucuri",
    ),
    WAFPattern(
        "Tencent Cloud Web Application Firewall (Tencent Cloud Computing)",
        "waf.tencent-cloud.com",
        "",
    ),
    WAFPattern(
        "Teros/Citrix Application Firewall Enterprise (Teros/Citrix Systems)",
        "",
        "st8(id|_wat|_wlf)",
    ),
    WAFPattern("TrafficShield (F5 Networks)", "", "F5-TrafficShield|ASINFO="),
    WAFPattern("UrlScan (Microsoft)", "Rejected-By-UrlScan", "Rejected-By-UrlScan"),
    WAFPattern(
        "USP Secure Entry Server (United Security Providers)", "", "Secure Entry Server"
    ),
    WAFPattern("Varnish FireWall (OWASP)", "Request rejected by xVarnish-WAF", ""),
    WAFPattern("Wallarm Web Application Firewall (Wallarm)", "", "nginx-wallarm"),
    WAFPattern("WatchGuard (WatchGuard Technologies)", "", "WatchGuard"),
    WAFPattern(
        "WebKnight Application Firewall (AQTRONIX)",
        "WebKnight Application Firewall Alert|AQTRONIX WebKnight",
        "WebKnight",
    ),
    WAFPattern(
        "Wordfence (Feedjit)",
        "This response was generated by Wordfence|Your access to this site has been limited",
        "",
    ),
    WAFPattern("Zenedge Web Application Firewall (Zenedge)", "", "ZENEDGE"),
    WAFPattern("Yundun Web Application Firewall (Yundun)", "", "YUNDUN"),
    WAFPattern("Yunsuo Web Application Firewall (Yunsuo)", "", "yunsuo_session"),
)


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str] | None:
    """Compile a signature, or return None if it is not a valid expression."""
    try:
        return re.compile(pattern)
    except re.error:
        return None


def _values(value: str | Iterable[str]) -> Iterable[str]:
    if isinstance(value, str):
        return (value,)
    return value


def _headers_match(regex: re.Pattern[str], headers: Mapping[str, str | Iterable[str]]) -> bool:
    return any(
        regex.search(name) or any(regex.search(v) for v in _values(value))
        for name, value in headers.items()
    )


def check_waf(headers: Mapping[str, str | Iterable[str]], body: str) -> tuple[bool, str]:
    """Return ``(True, name)`` for the first firewall signature that matches.

    ``headers`` maps header names to a value or a list of values. A signature whose
    body expression is invalid is skipped entirely; one whose header expression is
    invalid never matches on headers.
    """
    for pattern in PATTERNS:
        body_match = False
        if pattern.body:
            body_regex = _compile(pattern.body)
            if body_regex is None:
                continue
            body_match = body_regex.search(body) is not None

        header_match = False
        if pattern.header:
            header_regex = _compile(pattern.header)
            if header_regex is not None:
                header_match = _headers_match(header_regex, headers)

        if body_match or header_match:
            return True, pattern.name
    return False, ""