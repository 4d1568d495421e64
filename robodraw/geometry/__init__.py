"""Pose and geometry of the simulated robot."""

from .pose import Point, RobotPose, apply_command, display_heading, grid_readout, origin_pose

__all__ = ['Point', 'RobotPose', 'apply_command', 'display_heading', 'grid_readout', 'origin_pose']
