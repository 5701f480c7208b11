import numpy as np

from app.services.driver import SwarmRunner


def generate_swarm_report(run):
    """
    Generate a summary report of a swarm run

    Parameters:
    run: A SwarmRunner, or a bare Swarm (reported with no history)

    Returns:
    report: Dictionary with global best, per-particle state, convergence
    summary and the global best history
    """
    if isinstance(run, SwarmRunner):
        swarm = run.swarm
        history = list(run.history)
        iterations = run.iteration
        initial_best = run.initial_best_score
    else:
        swarm = run
        history = []
        iterations = 0
        initial_best = swarm.global_best_score

    report = {}

    if swarm.global_best_position is None:
        report['global_best'] = {'position': None, 'score': None}
    else:
        report['global_best'] = {
            'position': swarm.global_best_position.tolist(),
            'score': float(swarm.global_best_score),
        }

    particles = []
    distances = []
    for idx, particle in enumerate(swarm.particles):
        distance = float(np.linalg.norm(particle.position - swarm.global_best_position))
        distances.append(distance)
        particles.append({
            'particle_id': idx,
            'position': particle.position.tolist(),
            'velocity': particle.velocity.tolist(),
            'best_position': particle.best_position.tolist(),
            'best_score': float(particle.best_score),
            'score': float(particle.score),
            'distance_to_global_best': distance,
        })
    report['particles'] = particles

    if swarm.particles:
        final_best = float(swarm.global_best_score)
        initial_best = float(initial_best) if initial_best is not None else final_best
        report['convergence_summary'] = {
            'iterations': float(iterations),
            'initial_best_score': initial_best,
            'final_best_score': final_best,
            'improvement': initial_best - final_best,
            'mean_best_score': float(np.mean([p.best_score for p in swarm.particles])),
            'spread': float(np.mean(distances)),
        }
    else:
        report['convergence_summary'] = {'iterations': float(iterations)}

    report['history'] = [float(score) for score in history]

    return report
