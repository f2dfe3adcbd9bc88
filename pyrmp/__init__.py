"""Python Robot Motion Profiles: kinematic motion-profile generation for robot actuator control.

Primarily, this library computes time-parameterised (position, velocity) references that move
a single degree of freedom between two states within velocity and (possibly asymmetric)
acceleration/deceleration limits. Static profiles (`AsymmetricTrapezoidProfile`,
`TrapezoidProfile`) are planned once and sampled at any elapsed time; the dynamic profile
(`DynamicTrapezoidProfile`) computes the next setpoint every control tick from the current
measured state, so the goal can change at any time.

The outputs are meant to be consumed as setpoints by an external feedback/feedforward
controller.
"""
