import simpy

class MessageBroker:
    """
    Topic-based publish-subscribe channel between the controller and its
    consumers (console renderer, tests).

    Each topic is a simpy.Store, so a consumer process can wait on
    `yield broker.get(topic)` and receive messages in publish order.
    """
    def __init__(self, env: simpy.Environment, verbose: bool = False):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            verbose (bool): Print every published message
        """
        self.env = env
        self.verbose = verbose
        self.topics = {}  # Dictionary to hold Store for each topic

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def put(self, topic: str, message):
        """
        Publish (put) a message to the specified topic
        """
        if self.verbose:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        return self.get_pipe(topic).put(message)

    def get(self, topic: str):
        """
        Wait to receive (get) a message from the specified topic
        """
        return self.get_pipe(topic).get()

    def pending(self, topic: str) -> list:
        """Messages published on a topic and not yet consumed"""
        return list(self.get_pipe(topic).items)

    def get_current_time(self) -> float:
        """
        Get current simulation time
        """
        return self.env.now
