"""
Bundled demo genotype maps for trying the service without a raw export.
"""

from types import MappingProxyType
from typing import Mapping

_LDLR_RISK = {
    "rs429358": "CT", "rs7412": "CT", "rs688": "AG", "rs6511720": "GG", "rs3846662": "GG",
    "rs11591147": "GG", "rs1042031": "CC", "rs693": "CC", "rs6259": "GG",
    "rs662799": "GA", "rs3135506": "CG", "rs1260326": "TC", "rs780094": "TC",
    "rs328": "CG", "rs13702": "AT", "rs12678919": "AG", "rs10503669": "AC",
    "rs1748195": "GC", "rs10889353": "CT", "rs1044250": "CG", "rs11672433": "AG",
    "rs7255436": "GC", "rs4846914": "AG", "rs5128": "GT", "rs708272": "AG", "rs5882": "AG",
    "rs1801282": "CG", "rs7903146": "CT", "rs2943641": "CT", "rs9939609": "AT", "rs5400": "CT",
    "rs738409": "GC", "rs58542926": "TC", "rs2306986": "CG", "rs641738": "CT",
}

_TG_RISK = {
    "rs429358": "TT", "rs7412": "TT", "rs688": "AA", "rs6511720": "TT", "rs3846662": "AA",
    "rs11591147": "TT", "rs1042031": "AA", "rs693": "TT", "rs6259": "AA",
    "rs662799": "GG", "rs3135506": "CC", "rs1260326": "TT", "rs780094": "TT",
    "rs328": "CC", "rs13702": "TT", "rs12678919": "AA", "rs10503669": "AA",
    "rs1748195": "GG", "rs10889353": "CC", "rs1044250": "CC", "rs11672433": "AA",
    "rs7255436": "GG", "rs4846914": "GG", "rs5128": "GG", "rs708272": "GG", "rs5882": "GG",
    "rs1801282": "CC", "rs7903146": "CC", "rs2943641": "TT", "rs9939609": "TT", "rs5400": "CC",
    "rs738409": "CC", "rs58542926": "CC", "rs2306986": "CC", "rs641738": "CC",
}

_MIXED = {
    "rs429358": "CT", "rs7412": "TT", "rs688": "AG", "rs6511720": "TT", "rs3846662": "AG",
    "rs11591147": "GT", "rs1042031": "AC", "rs693": "CT", "rs6259": "AG",
    "rs662799": "GA", "rs3135506": "CG", "rs1260326": "TC", "rs780094": "TC",
    "rs328": "GG", "rs13702": "AA", "rs12678919": "AG", "rs10503669": "AA",
    "rs1748195": "GC", "rs10889353": "CT", "rs1044250": "CG", "rs11672433": "AG",
    "rs7255436": "GC", "rs4846914": "AG", "rs5128": "GT", "rs708272": "AG", "rs5882": "AG",
    "rs1801282": "CG", "rs7903146": "CT", "rs2943641": "CT", "rs9939609": "AT", "rs5400": "CT",
    "rs738409": "GC", "rs58542926": "TC", "rs2306986": "CG", "rs641738": "CT",
}

_MONO_FH_POSITIVE = {
    "rs5742904": "GA",
    "rs137852912": "GG",
    "rs28942111": "AA",
    **_LDLR_RISK,
}


DEMO_PROFILES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "LDLR-risk": MappingProxyType(_LDLR_RISK),
    "TG-risk": MappingProxyType(_TG_RISK),
    "Mixed": MappingProxyType(_MIXED),
    "MonoFH-positive": MappingProxyType(_MONO_FH_POSITIVE),
})


def get_demo_profile(name: str) -> Mapping[str, str]:
    """Return a demo genotype map; raises KeyError for unknown names."""
    return DEMO_PROFILES[name]
