# mcedecode

`mcedecode` turns the raw registers of an x86 machine check exception
(MCE) into readable text. It is a pure-Python library with no
dependencies.

It contains:

- the event record and CPU description (`mcedecode.event`),
- generic bit-field decoders (`mcedecode.bitfield`),
- the architectural AMD error-code decoder (`mcedecode.amd`),
- the AMD K8 bank decoder (`mcedecode.amd_k8`),
- Intel model-specific decoders for P4 / old P6 / Core 2
  (`intel_p6`), Tulsa (`intel_tulsa`), Dunnington (`intel_dunnington`),
  Nehalem and Xeon 75xx (`intel_nehalem`), Sandy Bridge (`intel_sb`),
  Ivy Bridge EP/EX (`intel_ivb`), Haswell EP/EX (`intel_haswell`),
  Broadwell DE (`intel_broadwell_de`), Knights Landing / Mill
  (`intel_knl`), Skylake Xeon (`intel_skylake`) and the 10nm server
  parts — Ice Lake Xeon and DE, Tremont D, Sapphire and Emerald Rapids
  (`intel_i10nm`).

## Installing

```
pip install mcedecode
```

## The event record

`MceEvent` is a dataclass holding the register values (`status`, `misc`,
`mcgstatus`, `mcgcap`, `bank`, `ipid`, `synd`, `cpu`, …) and the text
fields the decoders fill in: `bank_name`, `error_msg`, `mcgstatus_msg`,
`mcistatus_msg`, `mcastatus_msg`, `user_action` and `mc_location`.

`event.add(field, text)` appends text to one of those fields, separated
from what is already there by one space; `event.set(field, text)`
replaces it. Any other field name raises `ValueError`.

`McePriv` describes the system: a `CpuType` member, plus `family` and
`model`. `mcedecode.event` also defines the usual status-register bit
constants (`MCI_STATUS_VAL`, `MCI_STATUS_UC`, `MCG_STATUS_RIPV`, …).

## Decoding an event

Each decoder takes the event (and, for Sandy Bridge and Ivy Bridge, the
`McePriv`) and appends what it finds to the event's text fields.

```python
from mcedecode.event import MceEvent
from mcedecode.intel_skylake import skylake_s_decode_model

event = MceEvent(bank=13, status=0x8C00004000010090)
skylake_s_decode_model(event)

print(event.mcastatus_msg)  # "MemCtrl: "
print(event.error_msg)      # "Address parity error"
print(event.mc_location)    # "memory_channel=0"
```

Other entry points:

- `intel_p6.p4_decode_model(event)`, `core2_decode_model(event)`,
  `p6old_decode_model(event)`
- `intel_tulsa.tulsa_decode_model(event)`
- `intel_dunnington.dunnington_decode_model(event)`
- `intel_nehalem.nehalem_decode_model(event)`,
  `xeon75xx_decode_model(event)`
- `intel_sb.snb_decode_model(priv, event)`
- `intel_ivb.ivb_decode_model(priv, event)`
- `intel_haswell.hsw_decode_model(event)`
- `intel_broadwell_de.broadwell_de_decode_model(event)`
- `intel_knl.knl_decode_model(event)`
- `intel_i10nm.i10nm_decode_model(cputype, event)` — does nothing for a
  `CpuType` it does not cover
- `amd.decode_amd_errcode(event)` — severity, status flags and the
  TLB / memory / bus / internal error code of an AMD event
- `amd_k8.parse_amd_k8_event(event)` — names and decodes K8 banks 0–5
  and the threshold banks; returns `False` (and leaves the event
  untouched) for a northbridge GART error, `True` otherwise

## Lower-level helpers

`mcedecode.bitfield` holds the pieces the model tables are built from:
`extract(value, start, end)`, `mask(bits)`, `test_prefix(nr, value)`,
`bitfield_msg(bitarray, bit_offset, ignore_bits, status)`,
`decode_bitfield(event, status, fields)` and
`decode_numfield(event, status, fields)`, with the table builders
`field`, `sbitfield`, `field_null`, `number`, `numberforce`,
`hexnumber` and `hexnumberforce` and the `Field` / `NumField`
dataclasses.

## What it does not do

- There is no single entry point that decodes an Intel event from start
  to finish: the architectural MCG/MCi status and MCA error-code text,
  the thermal and timeout banks, and the choice of model decoder by
  `CpuType` are left to the caller. Call the model decoder that matches
  your processor directly.
- AMD Scalable MCA (family 17h and later) banks are not decoded; only
  `decode_amd_errcode` applies to them.
- Broadwell EP/EX has no model-specific decoder.
- Nothing here reads events from the kernel, stores them, or writes
  MSRs to enable extra memory-controller logging; the package only turns
  register values you already have into text.