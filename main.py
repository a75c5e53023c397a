# main.py
"""
Main entry point for the toroidal particle simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the particle store, the simulation engine and the display.
4. Runs the main loop: tick, draw, pace.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats
import sys

from constants import DEFAULT_HEIGHT, DEFAULT_WIDTH, FPS
from utils import load_config, setup_logging


def main(config_path: str = 'config.json') -> int:
    """
    The main function to run the simulation.

    Returns:
        int: Process exit code.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Particle Simulation Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    from particle import ParticleSystem
    from simulation import Simulation

    width = sim_params.get('width', DEFAULT_WIDTH)
    height = sim_params.get('height', DEFAULT_HEIGHT)
    headless = run_params.get('headless', False)
    log_throttle = max(1, run_params.get('log_throttle_steps', 100))
    max_steps = run_params.get('max_steps', 5000)

    if headless and not max_steps:
        msg = "Configuration error: a headless run needs a positive max_steps."
        logging.critical(msg)
        raise ValueError(msg)

    # --- Component Initialization ---
    particles = ParticleSystem(sim_params, width, height)
    sim = Simulation(particles, sim_params)

    visualizer = None
    if not headless:
        from visualization import Visualizer
        visualizer = Visualizer(
            width, height,
            particle_types=particles.particle_types,
            colors=vis_params.get('particle_colors'),
            fps=vis_params.get('fps', FPS),
        )

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    running = True
    step_num = 0

    if profiler:
        profiler.enable()
    try:
        while running:
            sim.step()
            step_num += 1

            # The visualizer owns the event queue. It returns False once
            # the user quits. It only ever sees a read-only snapshot.
            if visualizer and not visualizer.draw(particles.snapshot()):
                running = False

            # Hot loops must throttle logs
            if step_num % log_throttle == 0:
                logging.info(f"Simulation step {step_num}/{max_steps or 'unbounded'}")
                logging.debug(f"Step {step_num} | Mean Displacement: {sim.mean_displacement:.6f}")

            if max_steps and step_num >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False
    finally:
        if profiler:
            profiler.disable()
        if visualizer:
            visualizer.close()

    logging.info(f"Simulation loop finished after {step_num} steps.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
