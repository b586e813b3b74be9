# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Output formats for SIMBAD queries.

See http://simbad.u-strasbg.fr/simbad/sim-help?Page=sim-fscript for the
format language.  The ``\\n`` sequences are part of the SIMBAD format;
the real line breaks are removed before a format is sent.
"""

__all__ = ["FORMAT_TXT_SIMPLE_BASIC", "FORMAT_TXT_YAML_BASIC",
           "FORMAT_VO_BASIC"]

FORMAT_TXT_SIMPLE_BASIC = r"""---\n
name: %IDLIST(NAME|1)\n
type: %OTYPE\n
long: %OTYPELIST\n
ra: %COO(d;A)\n
dec: %COO(d;D)\n
plx: %PLX(V)\n
pmra: %PM(A)\n
pmdec: %PM(D)\n
radial: %RV(V)\n
redshift: %RV(Z)\n
spec: %SP(S)\n
bmag: %FLUXLIST(B)[%flux(F)]\n
vmag: %FLUXLIST(V)[%flux(F)]\n
ident: %IDLIST[%*,]
"""

# parsable by a YAML loader
FORMAT_TXT_YAML_BASIC = r"""---\n
name: '%IDLIST(NAME|1)'\n
type: '%OTYPE'\n
long: '%OTYPELIST'\n
ra: %COO(d;A)\n
dec: %COO(d;D)\n
plx: %PLX(V)\n
pm:\n
  - %PM(A)\n
  - %PM(D)\n
radial: %RV(V)\n
redshift: %RV(Z)\n
spec: %SP(S)\n
bmag: %FLUXLIST(B)[%flux(F)]\n
vmag: %FLUXLIST(V)[%flux(F)]\n
ident:\n%IDLIST[  - '%*'\n]
"""

FORMAT_VO_BASIC = ",".join([
    "id(NAME|1)", "otype", "ra(d)", "dec(d)", "plx_value", "pmra", "pmdec",
    "rv_value", "z_value", "sp_type", "flux(B)", "flux(V)"])
