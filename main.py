# main.py
"""
Main entry point for the Particle Life simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the display, the particle store and the force field.
4. Runs the main loop: clamp frame time, step, pack, draw.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config, clamp_frame_time
from constants import FPS
import cProfile
import pstats
import io

def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Life Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from config import RunControl, SimulationConfig
    from frame import FrameBuffer
    from particle import ParticleSystem
    from simulation import Simulation
    from visualization import Visualizer

    # Host-loop settings are checked before any window opens.
    try:
        run = RunControl.from_params(run_params)
    except ValueError:
        logging.critical("Aborting: invalid run control configuration.")
        return

    # --- Component Initialization ---
    # 1. The visualizer determines the world dimensions.
    visualizer = Visualizer(fullscreen=vis_params.get('fullscreen'))

    # 2. Validate everything before the first particle exists.
    try:
        sim_config = SimulationConfig.from_params(
            sim_params,
            visualizer.sim_width,
            visualizer.sim_height,
            colors=vis_params.get('particle_colors'),
        )
    except ValueError:
        visualizer.close()
        logging.critical("Aborting: invalid simulation configuration.")
        return

    particles = ParticleSystem.from_config(sim_config)
    sim = Simulation(particles, sim_config)
    # Colors are uploaded once here; species never change.
    frame = FrameBuffer(particles.species, sim_config.colors)

    profiler = cProfile.Profile() if run.profile else None

    running = True
    step_num = 0
    wall_time = 0.0

    if profiler:
        profiler.enable()
    while running:
        elapsed = visualizer.tick(FPS)
        wall_time += elapsed
        sim.step(clamp_frame_time(elapsed, run.max_frame_time))
        step_num += 1

        snapshot = frame.pack(particles)
        if not visualizer.draw(snapshot, wall_time, step_num):
            running = False

        # Hot loops must throttle logs
        if step_num % run.log_throttle_steps == 0:
            logging.info(f"Simulation step {step_num}, simulated time {sim.elapsed_time:.2f}s")
            logging.debug(
                f"Step {step_num} | Mean speed: {sim.mean_speed():.4f} | "
                f"Kinetic energy: {sim.kinetic_energy():.1f}"
            )

        if run.max_steps and step_num >= run.max_steps:
            logging.info(f"Reached max_steps ({run.max_steps}). Stopping simulation.")
            running = False
    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler:
        profiler.disable()
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Life Simulation Shutting Down ---")


if __name__ == "__main__":
    main(*sys.argv[1:2])
