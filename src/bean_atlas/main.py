import logging
from pathlib import Path

from bean_atlas.factory.analyzer_factory import AnalyzerFactory
from bean_atlas.factory.config_builder import IntrospectionConfigBuilder

logger = logging.getLogger(__name__)

def main():
    """Example usage of the bean analyzer."""
    args = {
        "project_path": "./data/repo/test",
        "project_id": "test",
        "output": "./result",
        "language": "java",
        "include_object_methods": False,
        "verbose": True
    }

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args["verbose"]:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)

    project_path = Path(args["project_path"])
    if not project_path.exists():
        logger.error(f"Project path {project_path} does not exist")
        return 1

    try:
        logger.info(f"Analyzing {args['language'].capitalize()} project at: {project_path}")

        config = IntrospectionConfigBuilder().with_object_methods(args["include_object_methods"]).build()
        analyzer = AnalyzerFactory.create_analyzer(args["language"], config)
        classes, registry = analyzer.parse_project(project_path, args["project_id"])
        beans = analyzer.introspect(classes, registry)

        logger.info("Introspection Results:")
        logger.info(f"Found {len(classes)} classes/interfaces/enums/records")
        logger.info(f"Type hierarchy has {registry.graph.number_of_nodes()} nodes "
                    f"and {registry.graph.number_of_edges()} edges")

        if args["output"]:
            output_path = Path(args["output"])
            analyzer.export_results(classes, beans, registry, output_path)

        stats = analyzer.generate_statistics(classes, beans)
        logger.info("Project Statistics:")
        logger.info(f"Total Classes: {stats['total_classes']}")
        logger.info(f"Total Beans: {stats['total_beans']}")
        logger.info(f"Total Properties: {stats['property_stats']['total']}")
        logger.info(f"Total Events: {stats['event_stats']['total']}")

        logger.info("Analysis completed successfully!")
        return 0

    except Exception as e:
        logger.exception(f"Error analyzing project: {e}")
        return 1

if __name__ == "__main__":
    exit(main())
