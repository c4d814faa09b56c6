# main.py
"""
Main entry point for the circuit animation.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the simulation engine and the Pygame visualizer.
4. Runs the frame loop: update the engine to the current time, project a
   snapshot, draw it.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import cProfile
import pstats
import io


def main(config_path: str = 'config.json'):
    """
    The main function to run the animation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Circuit Animation Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    from simulation import Simulation
    from visualization import Visualizer

    # The engine validates its configuration before any window opens.
    try:
        simulation = Simulation(sim_params)
    except ValueError as e:
        logging.critical(f"Invalid simulation parameters: {e}")
        return 1

    visualizer = Visualizer(vis_params)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = run_params.get('log_throttle_frames', 300)
    max_frames = run_params.get('max_frames', 0)

    simulation.start(visualizer.now())

    running = True
    frame_num = 0

    if profiler:
        profiler.enable()
    while running:
        now = visualizer.now()
        snapshot = simulation.snapshot(now)
        frame_num += 1

        # The visualizer returns False once the user quits.
        if not visualizer.draw(snapshot, simulation):
            running = False
        visualizer.tick()

        # Hot loops throttle their logs.
        if frame_num % log_throttle == 0:
            logging.info(
                f"Frame {frame_num} | state={snapshot.state.name} "
                f"electrolyte={snapshot.electrolyte_level:.0f} ions={snapshot.ion_count}"
            )
            logging.debug(
                f"Frame {frame_num} | visible electrons={snapshot.visible_particle_count} "
                f"released electrons={len(snapshot.spawn_points)} "
                f"field markers={len(snapshot.field_markers)}"
            )

        if max_frames and frame_num >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping.")
            running = False
    if profiler:
        profiler.disable()

    simulation.close()
    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Circuit Animation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
