"""Run an elevator simulation from the command line, in real time or instantly."""
import argparse
import sys

# Configuration
from config import SimulationConfig, load_simulation_config

# Simulator components
from simulator.core.elevator import ElevatorController
from simulator.errors import SimulationError
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment
from simulator.input_parser import parse_floors, parse_start_floor

# Analyzer
from analyzer.statistics import RunStatistics, format_step


def console_renderer(env, broker, topic):
    """Print each step as soon as the controller announces it"""
    while True:
        event = yield broker.get(topic)
        print(f"{env.now:7.2f}  {format_step(event)}")


def run_simulation(sim_config: SimulationConfig, trace: bool = False) -> int:
    """
    Parse the request, run it in the configured mode and report the result

    Args:
        sim_config: Run configuration (raw form inputs and run controls)
        trace: Print the controller's internal trace lines

    Returns:
        Process exit status (0 on success, 1 on any error)
    """
    # Input errors are reported before any simulation state exists
    try:
        variant = sim_config.resolve_variant()
        start_floor = parse_start_floor(sim_config.start_floor)
        destinations = parse_floors(sim_config.destination_floors)
    except ValueError as error:
        print(f"Error: {error}")
        return 1

    print("--- Simulation Setup ---")
    print(f"Start floor: {start_floor}")
    print(f"Destinations: {','.join(str(f) for f in destinations)}")
    print(f"Elevator: {variant.name} ({variant.floor_travel_time:g} sec per floor)")
    print(f"Mode: {sim_config.mode}")

    stats = RunStatistics()
    stats.set_simulation_metadata({
        'start_floor': start_floor,
        'destination_floors': destinations,
        'variant': variant.to_dict(),
        'mode': sim_config.mode,
        'speed_factor': sim_config.speed_factor
    })

    exit_code = 0
    if sim_config.mode == "realtime":
        env = RealtimeEnvironment(speed_factor=sim_config.speed_factor)
        broker = MessageBroker(env)
        controller = ElevatorController(start_floor, destinations, variant, broker=broker, verbose=trace)
        env.process(console_renderer(env, broker, controller.steps_topic))

        print(f"\n--- Simulation Start (speed {sim_config.speed_factor:g}x) ---")
        try:
            controller.start(env=env, on_update=stats.record_event)
        except SimulationError as error:
            print(f"Error: {error}")
            exit_code = 1
    else:
        controller = ElevatorController(start_floor, destinations, variant, verbose=trace)
        print("\n--- Simulation Start (instant) ---")
        try:
            controller.compute_immediate()
        except SimulationError as error:
            print(f"Error: {error}")
            exit_code = 1
        else:
            stats.record_result(controller.get_results(), controller.status, controller.current_floor)
            stats.print_steps()
    print("--- Simulation End ---")

    if stats.result is None:
        stats.record_result(controller.get_results(), controller.status, controller.current_floor)

    stats.print_summary()

    if sim_config.event_log:
        stats.save_event_log(sim_config.event_log)
    if sim_config.plot and exit_code == 0:
        stats.plot_route_diagram(sim_config.plot)

    return exit_code


def build_config(args) -> SimulationConfig:
    """Load the YAML file (if any) and apply command line overrides"""
    config = load_simulation_config(args.config) if args.config else SimulationConfig()
    overrides = {
        'start_floor': args.start,
        'destination_floors': args.floors,
        'variant': args.variant,
        'mode': args.mode,
        'speed_factor': args.speed,
        'event_log': args.log,
        'plot': args.plot,
    }
    data = config.to_dict()['simulation']
    data.update({key: value for key, value in overrides.items() if value is not None})
    config = SimulationConfig.from_dict(data)
    config.validate()
    return config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", help="Path to a YAML run configuration")
    parser.add_argument("--start", help="Start floor (default: 10)")
    parser.add_argument("--floors", help="Comma-separated destination floors (default: 9,11,13)")
    parser.add_argument("--variant", help="Elevator variant: standard, express or one declared in the config")
    parser.add_argument("--mode", choices=["realtime", "instant"], help="Execution mode (default: realtime)")
    parser.add_argument("--speed", type=float, help="Real-time speed factor, 0 = no delay (default: 1.0)")
    parser.add_argument("--log", help="Write the step events to this JSON Lines file")
    parser.add_argument("--plot", help="Save a route diagram to this image file")
    parser.add_argument("--trace", action="store_true", help="Print the controller's internal trace")
    args = parser.parse_args(argv)

    try:
        sim_config = build_config(args)
    except (FileNotFoundError, ValueError) as error:
        print(f"Error: {error}")
        return 1

    return run_simulation(sim_config, trace=args.trace)


if __name__ == '__main__':
    sys.exit(main())
