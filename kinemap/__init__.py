from kinemap.camera import Camera
from kinemap.controller import ViewController
from kinemap.covers import Cover, CoverMethod
from kinemap.distant_solver import Cover1D, DistantSolution, Region, distant_solve, merge_solve_1d
from kinemap.frames import UserFrame
from kinemap.inertia import InertiaModel, LinearBrakingModel
from kinemap.merge_solver import CoverSolution, CoverSolver, merge_solve
from kinemap.panning import MOUSE, MousePointer, PanningSession, TouchPointer, trail_velocity
from kinemap.playback import CancellationToken, InertiaPlayback
from kinemap.smallest_circle import Circle, smallest_enclosing_circle
