# main.py
"""
Main entry point for the flow field simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the renderer and the particle system.
4. Runs the main tick loop.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import cProfile
import pstats
import io

from constants import FPS, DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT, BACKGROUND_COLOR


def main():
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Flow Field Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    import pygame
    from parameters import SimulationConfig
    from simulation import ParticleSystem
    from visualization import SurfaceRenderer, Visualizer

    width = vis_params.get('canvas_width', DEFAULT_CANVAS_WIDTH)
    height = vis_params.get('canvas_height', DEFAULT_CANVAS_HEIGHT)
    headless = run_params.get('headless', False)

    # --- Component Initialization ---
    # 1. The draw target: a window, or an off-screen surface usable as a texture.
    if headless:
        visualizer = None
        canvas = pygame.Surface((width, height))
        canvas.fill(BACKGROUND_COLOR)
        renderer = SurfaceRenderer(canvas)
        logging.info(f"Running headless on a {width}x{height} off-screen surface.")
    else:
        visualizer = Visualizer(width, height)
        renderer = visualizer.renderer

    # 2. The simulation itself, drawing through the renderer.
    system = ParticleSystem(SimulationConfig.from_params(sim_params), width, height, renderer=renderer)

    profiler = cProfile.Profile()

    log_throttle = run_params.get('log_throttle_steps', 100)
    max_steps = run_params.get('max_steps', 5000)

    running = True
    step_num = 0

    profiler.enable()
    while running:
        system.tick()
        step_num += 1

        if visualizer is not None:
            if not visualizer.draw(system):
                running = False
            visualizer.clock.tick(FPS)

        # Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(f"Simulation step {step_num}/{max_steps}")
            alive = sum(1 for p in system.particles if p.life > 0)
            logging.debug(f"Step {step_num} | {alive}/{len(system.particles)} particles alive")

        if step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    profiler.disable()

    output_image = run_params.get('output_image')
    if output_image:
        surface = visualizer.canvas if visualizer is not None else canvas
        pygame.image.save(surface, output_image)
        logging.info(f"Final frame saved to {output_image}.")

    if visualizer is not None:
        visualizer.close()
    logging.info("Simulation loop finished.")

    # --- Performance Profile Output ---
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Flow Field Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
