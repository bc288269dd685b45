"""Demo script: size the stock hull for an orbital climb and show the segment timeline."""
from ssto_sim.design import EngineMode, FlightPlan, Waypoint
from ssto_sim.main import run_mission
import numpy as np

plan = FlightPlan([
    Waypoint(40000.0, 3.0, EngineMode.EJECTOR_RAMJET),
    Waypoint(80000.0, 5.0, EngineMode.RAMJET),
    Waypoint(656200.0, 24.0, EngineMode.ROCKET),
])
run = run_mission(flight_plan=plan, optimize=True)

print("\n\n===== SIZING =====")
print(run.optimization.summary())
for i, (length, error) in enumerate(run.optimization.history, start=1):
    print(f"  iter {i:2d} | L={length:8.2f} m | fuel error={error:14,.0f} kg")

print()
print("===== MASS =====")
print(run.mass.summary())
print(run.volume_requirement.summary())

print()
print("===== SEGMENT TIMELINE =====")
log = run.log
if len(log) > 0:
    times = np.array(log.time)
    alts = np.array(log.altitude_ft) / 1000.0
    machs = np.array(log.mach)
    temps = np.array(log.temperature_c)
    prev_mode = None
    for i in range(len(log)):
        if log.engine_mode[i] != prev_mode:
            print(f"  t={times[i]:8.1f}s | Alt={alts[i]:8.1f} kft | "
                  f"M={machs[i]:6.2f} | T={temps[i]:7.0f} C | Engine: {log.engine_mode[i]}")
            prev_mode = log.engine_mode[i]
    print(f"Peak leading-edge temperature: {np.max(temps):.0f} C")

for index, segment in enumerate(run.mission.segments, start=1):
    print(f"Segment {index}: {segment.termination}, {segment.duration:.1f}s, "
          f"{segment.fuel_used:,.0f} L")

print()
print(run.mission.summary())
